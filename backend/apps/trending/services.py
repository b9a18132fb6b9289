"""
Trending job handler - asks the query service to recalculate trending events.
"""

import httpx

from apps.core.http import bearer_headers
from apps.core.logging import get_logger
from apps.identity.tokens import BatchContext
from apps.queues.outcomes import Outcome
from apps.trending.schemas import TrendingMessage

logger = get_logger(__name__)

SUCCESS_STATUSES = (200, 202)


class TrendingJobHandler:
    """Handles messages from the trending-job queue."""

    def __init__(self, http: httpx.Client, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    @property
    def calculate_url(self) -> str:
        return f"{self.base_url}/internal/v1/trending/calculate-all"

    def __call__(self, message: object, batch: BatchContext) -> Outcome:
        # Any body on this queue triggers a recalculation
        token = batch.bearer_token()
        try:
            response = self.http.post(self.calculate_url, json={}, headers=bearer_headers(token))
        except httpx.HTTPError as e:
            logger.warning("trending_request_failed", error=str(e))
            return Outcome.RETRY

        if response.status_code not in SUCCESS_STATUSES:
            logger.warning(
                "trending_request_rejected",
                status_code=response.status_code,
                response=response.text[:500],
            )
            return Outcome.RETRY

        logger.info(
            "trending_calculation_requested",
            status_code=response.status_code,
            triggered_at=message.timestamp if isinstance(message, TrendingMessage) else "",
        )
        return Outcome.APPLIED
