"""
Core security - authentication classes for API.
"""

import hmac

from django.conf import settings
from ninja.security import APIKeyHeader, HttpBearer

from apps.identity.tokens import subject_from_jwt


class BearerAuth(HttpBearer):
    """
    Bearer token authentication for user-facing endpoints.

    Signature validation happens at the API gateway. This class extracts the
    user id (``sub`` claim) so endpoints can scope data to the caller.
    """

    def authenticate(self, request, token: str) -> str | None:
        """
        Return the user id from the token, None otherwise (triggers 401).
        """
        if not token:
            return None
        return subject_from_jwt(token)


class InternalApiKeyAuth(APIKeyHeader):
    """
    Shared-key authentication for service-to-service endpoints.

    Rejects everything when INTERNAL_API_KEY is not configured.
    """

    param_name = "X-API-Key"

    def authenticate(self, request, key: str | None) -> str | None:
        expected = getattr(settings, "INTERNAL_API_KEY", "")
        if not expected or not key:
            return None
        if hmac.compare_digest(key.encode(), expected.encode()):
            return key
        return None
