"""
Shared pytest fixtures for all tests.

This module provides common fixtures used across multiple test modules.
Individual test modules can override these fixtures if needed.

Factories
---------
Import factories directly from their modules:

    from tests.subscriptions.factories import SubscriberFactory, SubscriptionFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        subscriber = SubscriberFactory.create(email="test@example.com")
        SubscriptionFactory.create(subscriber=subscriber, category="session")
"""

from collections.abc import Callable

import httpx
import jwt
import pytest
from django.test import Client, RequestFactory

from apps.identity.keycloak_client import get_identity_client
from apps.scheduling.services import get_schedule_service


@pytest.fixture(autouse=True)
def clear_client_singletons():
    """Reset lru_cache singletons so patched settings take effect per test."""
    get_schedule_service.cache_clear()
    get_identity_client.cache_clear()
    yield
    get_schedule_service.cache_clear()
    get_identity_client.cache_clear()


@pytest.fixture
def request_factory() -> RequestFactory:
    """Django request factory for unit testing views."""
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def user_token() -> Callable[[str], str]:
    """
    Factory fixture for bearer tokens carrying a ``sub`` claim.

    Signatures are not checked by the service, so any key works.

    Example:
        def test_endpoint(api_client, user_token):
            headers = {"Authorization": f"Bearer {user_token('user-1')}"}
    """

    def _make_token(subject: str) -> str:
        return jwt.encode({"sub": subject}, "test-signing-key-0123456789abcdef0123", algorithm="HS256")

    return _make_token


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """
    Factory fixture for an httpx client backed by a handler function.

    Example:
        def test_call(mock_http):
            http = mock_http(lambda request: httpx.Response(200, json={}))
    """

    def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make_client

