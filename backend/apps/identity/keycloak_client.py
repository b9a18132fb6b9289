"""
Keycloak client wrapper.

Client-credentials tokens for service-to-service calls, and admin user lookups
used to resolve subscriber emails and display names.
"""

from dataclasses import dataclass
from functools import lru_cache

import httpx
from django.conf import settings

from apps.core.http import bearer_headers, build_http_client
from apps.core.logging import get_logger
from apps.identity.exceptions import TokenFetchError, UserLookupError

logger = get_logger(__name__)


@dataclass
class UserDetails:
    """A user record from the Keycloak admin API."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class KeycloakClient:
    """Keycloak realm client using the client-credentials grant."""

    def __init__(
        self,
        http: httpx.Client,
        base_url: str,
        realm: str,
        client_id: str,
        client_secret: str,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.realm = realm
        self.client_id = client_id
        self.client_secret = client_secret

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/token"

    def fetch_service_token(self) -> str:
        """
        Obtain an access token for this service.

        Raises:
            TokenFetchError: On transport failure, non-200 status, or a
                response without an access_token.
        """
        try:
            response = self.http.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
        except httpx.HTTPError as e:
            logger.error("service_token_request_failed", error=str(e))
            raise TokenFetchError(f"Token request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "service_token_rejected",
                status_code=response.status_code,
                response=response.text[:500],
            )
            raise TokenFetchError(f"Token endpoint returned {response.status_code}")

        try:
            token = response.json().get("access_token")
        except ValueError as e:
            raise TokenFetchError("Token endpoint returned invalid JSON") from e

        if not token:
            raise TokenFetchError("Token endpoint response has no access_token")
        return token

    def get_user(self, user_id: str, token: str | None = None) -> UserDetails:
        """
        Load a user from the admin API.

        Fetches a service token first when none is given.

        Raises:
            UserLookupError: If the user is missing or the request fails.
            TokenFetchError: If a token had to be fetched and could not be.
        """
        if token is None:
            token = self.fetch_service_token()

        url = f"{self.base_url}/admin/realms/{self.realm}/users/{user_id}"
        try:
            response = self.http.get(url, headers=bearer_headers(token))
        except httpx.HTTPError as e:
            raise UserLookupError(f"User lookup failed: {e}") from e

        if response.status_code != 200:
            raise UserLookupError(f"User lookup for {user_id} returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UserLookupError(f"User lookup for {user_id} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UserLookupError(f"User lookup for {user_id} returned an unexpected body")

        email = data.get("email") or ""
        if not email:
            raise UserLookupError(f"User {user_id} has no email")

        return UserDetails(
            id=data.get("id", user_id),
            email=email,
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
        )

    def get_user_email(self, user_id: str, token: str | None = None) -> str:
        return self.get_user(user_id, token=token).email


def build_keycloak_client(http: httpx.Client) -> KeycloakClient:
    """Build a Keycloak client from Django settings."""
    return KeycloakClient(
        http=http,
        base_url=settings.KEYCLOAK_URL,
        realm=settings.KEYCLOAK_REALM,
        client_id=settings.KEYCLOAK_CLIENT_ID,
        client_secret=settings.KEYCLOAK_CLIENT_SECRET,
    )


@lru_cache(maxsize=1)
def get_identity_client() -> KeycloakClient:
    """
    Get the Keycloak client used by the HTTP API (singleton).

    Consumer loops build their own client so they do not share a connection pool.
    """
    return build_keycloak_client(build_http_client())
