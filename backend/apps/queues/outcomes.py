"""
Message outcomes.

Every routed message ends in exactly one outcome; only acknowledged outcomes
delete the message from its queue. Everything else is retried by redelivery.
"""

from enum import StrEnum


class Outcome(StrEnum):
    APPLIED = "applied"
    ALREADY_RESOLVED = "already_resolved"
    MALFORMED = "malformed"
    RETRY = "retry"

    @property
    def acknowledged(self) -> bool:
        return self in ACKNOWLEDGED_OUTCOMES


ACKNOWLEDGED_OUTCOMES = frozenset({Outcome.APPLIED, Outcome.ALREADY_RESOLVED, Outcome.MALFORMED})


class TransportErrorKind(StrEnum):
    """Why a request produced no HTTP status."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    OTHER = "other"


def classify_session_response(
    status_code: int | None, error_kind: TransportErrorKind | str | None = None
) -> Outcome:
    """
    Map a session API response to an outcome.

    200 applied the transition. 404 (session gone) and 409 (session already
    past this state) can never succeed on retry. Transport errors and every
    other status are retried.
    """
    if error_kind is not None or status_code is None:
        return Outcome.RETRY
    if status_code == 200:
        return Outcome.APPLIED
    if status_code in (404, 409):
        return Outcome.ALREADY_RESOLVED
    return Outcome.RETRY
