"""
Event query service client.

Read-only lookups; 404 is reported separately from every other failure.
"""

from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from apps.core.logging import get_logger
from apps.reminders.exceptions import QueryServiceError, ResourceNotFoundError
from apps.reminders.schemas import EventBasicInfo, SessionExtendedInfo

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class EventQueryClient:
    """Client for the public event query endpoints."""

    def __init__(self, http: httpx.Client, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    def get_session_extended_info(self, session_id: str) -> SessionExtendedInfo:
        """
        Raises:
            ResourceNotFoundError: No such session.
            QueryServiceError: Any other failure.
        """
        url = f"{self.base_url}/v1/events/sessions/{session_id}/extended-info"
        return self._get(url, SessionExtendedInfo)

    def get_event_basic_info(self, event_id: str) -> EventBasicInfo:
        """
        Raises:
            ResourceNotFoundError: No such event.
            QueryServiceError: Any other failure.
        """
        url = f"{self.base_url}/v1/events/{event_id}/basic-info"
        return self._get(url, EventBasicInfo)

    def _get(self, url: str, model: type[ModelT]) -> ModelT:
        try:
            response = self.http.get(url)
        except httpx.HTTPError as e:
            raise QueryServiceError(f"Request to {url} failed: {e}") from e

        if response.status_code == 404:
            raise ResourceNotFoundError(f"Not found: {url}")
        if response.status_code != 200:
            raise QueryServiceError(
                f"{url} returned {response.status_code}: {response.text[:500]}"
            )

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise QueryServiceError(f"Invalid response from {url}: {e}") from e
