"""
Scheduling API endpoints.

Internal ingestion of session change records. Each change is planned and
written to the trigger store synchronously.
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.security import InternalApiKeyAuth
from apps.scheduling.planning import apply_session_change
from apps.scheduling.schemas import SessionChange, SessionChangeResult
from apps.scheduling.services import get_schedule_service

router = Router(tags=["scheduling"])
internal_auth = InternalApiKeyAuth()


@router.post(
    "/session-changes",
    response=SessionChangeResult,
    auth=internal_auth,
    operation_id="applySessionChange",
    summary="Apply a session change",
    description="Create, move or delete the schedules implied by a session row change.",
)
def apply_session_change_endpoint(
    request: HttpRequest, payload: SessionChange
) -> SessionChangeResult:
    """Plan and apply schedule writes for one session change."""
    result = apply_session_change(payload, get_schedule_service())
    return SessionChangeResult(
        session_id=payload.session_id,
        op=payload.op,
        scheduled=result.scheduled,
        deleted=result.deleted,
        failed=result.failed,
    )
