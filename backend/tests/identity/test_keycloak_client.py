"""
Tests for the Keycloak client.
"""

import httpx
import pytest

from apps.identity.exceptions import TokenFetchError, UserLookupError
from apps.identity.keycloak_client import KeycloakClient, UserDetails

BASE_URL = "http://keycloak.test"


def make_client(mock_http, handler) -> KeycloakClient:
    return KeycloakClient(
        http=mock_http(handler),
        base_url=BASE_URL,
        realm="event-ticketing",
        client_id="scheduler-service-client",
        client_secret="test-secret",
    )


class TestFetchServiceToken:
    """Tests for KeycloakClient.fetch_service_token."""

    def test_returns_access_token(self, mock_http):
        """Should post client credentials and return the access token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 300})

        token = make_client(mock_http, handler).fetch_service_token()

        assert token == "tok-1"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == (
            "http://keycloak.test/realms/event-ticketing/protocol/openid-connect/token"
        )
        body = request.content.decode()
        assert "grant_type=client_credentials" in body
        assert "client_id=scheduler-service-client" in body
        assert "client_secret=test-secret" in body

    def test_raises_on_non_200(self, mock_http):
        client = make_client(mock_http, lambda request: httpx.Response(401, text="unauthorized"))

        with pytest.raises(TokenFetchError):
            client.fetch_service_token()

    def test_raises_on_missing_access_token(self, mock_http):
        client = make_client(mock_http, lambda request: httpx.Response(200, json={"token_type": "bearer"}))

        with pytest.raises(TokenFetchError):
            client.fetch_service_token()

    def test_raises_on_invalid_json(self, mock_http):
        client = make_client(mock_http, lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(TokenFetchError):
            client.fetch_service_token()

    def test_raises_on_transport_error(self, mock_http):
        """Should wrap connection failures."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TokenFetchError):
            make_client(mock_http, handler).fetch_service_token()


class TestGetUser:
    """Tests for KeycloakClient.get_user."""

    def test_returns_user_details(self, mock_http):
        """Should read the user with the given token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"id": "u-1", "email": "ada@example.com", "firstName": "Ada", "lastName": "Lovelace"},
            )

        user = make_client(mock_http, handler).get_user("u-1", token="tok-1")

        assert user == UserDetails(id="u-1", email="ada@example.com", first_name="Ada", last_name="Lovelace")
        assert user.display_name == "Ada Lovelace"
        assert str(seen[0].url) == "http://keycloak.test/admin/realms/event-ticketing/users/u-1"
        assert seen[0].headers["Authorization"] == "Bearer tok-1"

    def test_fetches_token_when_not_given(self, mock_http):
        """Should obtain a service token first."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/token"):
                return httpx.Response(200, json={"access_token": "fresh"})
            assert request.headers["Authorization"] == "Bearer fresh"
            return httpx.Response(200, json={"id": "u-2", "email": "grace@example.com"})

        assert make_client(mock_http, handler).get_user_email("u-2") == "grace@example.com"

    def test_raises_when_user_missing(self, mock_http):
        client = make_client(mock_http, lambda request: httpx.Response(404))

        with pytest.raises(UserLookupError):
            client.get_user("missing", token="tok")

    def test_raises_when_user_has_no_email(self, mock_http):
        client = make_client(mock_http, lambda request: httpx.Response(200, json={"id": "u-3"}))

        with pytest.raises(UserLookupError):
            client.get_user("u-3", token="tok")

    def test_raises_on_non_json_body(self, mock_http):
        """A gateway page with a 200 status is a lookup failure."""
        client = make_client(mock_http, lambda request: httpx.Response(200, text="<html>gateway</html>"))

        with pytest.raises(UserLookupError):
            client.get_user("u-4", token="tok")

    def test_raises_on_non_object_body(self, mock_http):
        client = make_client(mock_http, lambda request: httpx.Response(200, json=["u-5"]))

        with pytest.raises(UserLookupError):
            client.get_user("u-5", token="tok")

    def test_display_name_empty_without_names(self):
        assert UserDetails(id="u", email="e@example.com").display_name == ""
