"""
Tests for core security module.

Tests BearerAuth and InternalApiKeyAuth authentication classes.
"""

import jwt
from django.http import HttpRequest
from django.test import override_settings

from apps.core.security import BearerAuth, InternalApiKeyAuth


class TestBearerAuth:
    """Tests for BearerAuth authentication class."""

    def test_authenticate_returns_subject(self) -> None:
        """Should return the sub claim of a decodable token."""
        token = jwt.encode({"sub": "user-123"}, "test-signing-key-0123456789abcdef0123", algorithm="HS256")

        result = BearerAuth().authenticate(HttpRequest(), token)

        assert result == "user-123"

    def test_authenticate_returns_none_for_garbage(self) -> None:
        """Should return None for a token that is not a JWT."""
        assert BearerAuth().authenticate(HttpRequest(), "not-a-jwt") is None

    def test_authenticate_returns_none_without_subject(self) -> None:
        """Should return None when the token has no sub claim."""
        token = jwt.encode({"scope": "openid"}, "test-signing-key-0123456789abcdef0123", algorithm="HS256")

        assert BearerAuth().authenticate(HttpRequest(), token) is None

    def test_authenticate_returns_none_for_empty_token(self) -> None:
        assert BearerAuth().authenticate(HttpRequest(), "") is None


class TestInternalApiKeyAuth:
    """Tests for InternalApiKeyAuth authentication class."""

    @override_settings(INTERNAL_API_KEY="secret-key")
    def test_accepts_matching_key(self) -> None:
        """Should return the key when it matches the configured one."""
        assert InternalApiKeyAuth().authenticate(HttpRequest(), "secret-key") == "secret-key"

    @override_settings(INTERNAL_API_KEY="secret-key")
    def test_rejects_wrong_key(self) -> None:
        assert InternalApiKeyAuth().authenticate(HttpRequest(), "other-key") is None

    @override_settings(INTERNAL_API_KEY="secret-key")
    def test_rejects_missing_key(self) -> None:
        assert InternalApiKeyAuth().authenticate(HttpRequest(), None) is None

    @override_settings(INTERNAL_API_KEY="")
    def test_rejects_everything_when_unconfigured(self) -> None:
        """Should reject every request when no key is configured."""
        assert InternalApiKeyAuth().authenticate(HttpRequest(), "") is None
        assert InternalApiKeyAuth().authenticate(HttpRequest(), "anything") is None
