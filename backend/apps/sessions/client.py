"""
Session management API client.
"""

from dataclasses import dataclass

import httpx

from apps.core.http import bearer_headers
from apps.core.logging import get_logger
from apps.queues.outcomes import TransportErrorKind
from apps.scheduling.constants import SessionAction

logger = get_logger(__name__)

ACTION_PATHS: dict[SessionAction, str] = {
    SessionAction.ON_SALE: "on-sale",
    SessionAction.CLOSED: "closed",
}


@dataclass
class TransitionResult:
    """Result of a session transition request."""

    status_code: int | None
    error_kind: TransportErrorKind | None = None
    error_message: str = ""
    response_snippet: str = ""


class EventServiceClient:
    """Client for the session state endpoints of the event service."""

    def __init__(self, http: httpx.Client, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    def transition_url(self, session_id: str, action: SessionAction) -> str:
        return f"{self.base_url}/internal/v1/sessions/{session_id}/{ACTION_PATHS[action]}"

    def transition_session(
        self, session_id: str, action: SessionAction, token: str
    ) -> TransitionResult:
        """
        PATCH the session into its new state.

        Never raises for HTTP or transport failures; they are reported in the
        result so the caller can classify them.
        """
        url = self.transition_url(session_id, action)
        try:
            response = self.http.patch(url, headers=bearer_headers(token))
        except httpx.TimeoutException as e:
            return TransitionResult(
                status_code=None,
                error_kind=TransportErrorKind.TIMEOUT,
                error_message=str(e) or "Request timed out",
            )
        except httpx.ConnectError as e:
            return TransitionResult(
                status_code=None,
                error_kind=TransportErrorKind.CONNECTION,
                error_message=str(e),
            )
        except httpx.HTTPError as e:
            return TransitionResult(
                status_code=None,
                error_kind=TransportErrorKind.OTHER,
                error_message=str(e),
            )

        return TransitionResult(
            status_code=response.status_code,
            response_snippet=response.text[:500] if response.text else "",
        )
