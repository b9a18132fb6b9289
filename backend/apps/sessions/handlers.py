"""
Session action handler - applies ON_SALE / CLOSED transitions.
"""

from apps.core.logging import get_logger
from apps.identity.tokens import BatchContext
from apps.queues.outcomes import Outcome, classify_session_response
from apps.scheduling.schemas import SessionStatusMessage
from apps.sessions.client import EventServiceClient

logger = get_logger(__name__)


class SessionActionHandler:
    """Handles messages from the session-scheduling queue."""

    def __init__(self, client: EventServiceClient):
        self.client = client

    def __call__(self, message: SessionStatusMessage, batch: BatchContext) -> Outcome:
        # TokenFetchError propagates: it aborts the rest of the batch
        token = batch.bearer_token()
        result = self.client.transition_session(message.session_id, message.action, token)
        outcome = classify_session_response(result.status_code, result.error_kind)

        log_fields = {
            "session_id": message.session_id,
            "action": str(message.action),
            "status_code": result.status_code,
            "outcome": str(outcome),
        }
        if outcome == Outcome.APPLIED:
            logger.info("session_transition_applied", **log_fields)
        elif outcome == Outcome.ALREADY_RESOLVED:
            logger.info("session_transition_already_resolved", **log_fields)
        else:
            logger.warning(
                "session_transition_failed",
                error_kind=str(result.error_kind) if result.error_kind else None,
                error=result.error_message or result.response_snippet,
                **log_fields,
            )
        return outcome
