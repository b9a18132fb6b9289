"""
Shared HTTP client construction.

Each consumer loop owns one httpx.Client for its lifetime; connection pools
are not shared between loops.
"""

import httpx
from django.conf import settings

DEFAULT_TIMEOUT = 10.0


def build_http_client(timeout: float | None = None) -> httpx.Client:
    """Build an httpx client with the service-wide request timeout."""
    if timeout is None:
        timeout = getattr(settings, "HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT)
    return httpx.Client(
        timeout=timeout,
        headers={"Accept": "application/json"},
    )


def bearer_headers(token: str) -> dict[str, str]:
    """Authorization header for a service token."""
    return {"Authorization": f"Bearer {token}"}
