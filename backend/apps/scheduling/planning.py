"""
Session change planner.

Turns a session row change into the schedule writes it implies. Planning is
pure; ``apply_session_change`` executes a plan against a ScheduleService.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from apps.core.logging import get_logger
from apps.scheduling.constants import (
    ACTION_PREFIXES,
    ALL_PREFIXES,
    REMINDER_LEAD_TIMES,
    REMINDER_PREFIXES,
    SESSION_STATUS_CANCELLED,
    ReminderType,
    SessionAction,
)
from apps.scheduling.exceptions import SchedulingError
from apps.scheduling.schemas import SessionChange, SessionSnapshot
from apps.scheduling.services import ScheduleService

logger = get_logger(__name__)


class OperationType(StrEnum):
    SCHEDULE_ACTION = "schedule_action"
    SCHEDULE_REMINDER = "schedule_reminder"
    DELETE = "delete"


@dataclass(frozen=True)
class ScheduleOperation:
    """A single write against the trigger store."""

    type: OperationType
    session_id: str
    name_prefix: str
    when: datetime | None = None
    action: SessionAction | None = None
    reminder_type: ReminderType | None = None

    @property
    def schedule_name(self) -> str:
        return f"{self.name_prefix}{self.session_id}"


@dataclass
class ApplyResult:
    """Schedule names grouped by what happened to them."""

    scheduled: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def _action_op(session_id: str, when: datetime, action: SessionAction) -> ScheduleOperation:
    return ScheduleOperation(
        type=OperationType.SCHEDULE_ACTION,
        session_id=session_id,
        name_prefix=ACTION_PREFIXES[action],
        when=when,
        action=action,
    )


def _reminder_op(
    session_id: str, anchor: datetime, reminder_type: ReminderType, now: datetime
) -> ScheduleOperation | None:
    when = anchor - REMINDER_LEAD_TIMES[reminder_type]
    if when <= now:
        logger.info(
            "reminder_skipped_in_past",
            session_id=session_id,
            reminder_type=str(reminder_type),
            fire_at=when.isoformat(),
        )
        return None
    return ScheduleOperation(
        type=OperationType.SCHEDULE_REMINDER,
        session_id=session_id,
        name_prefix=REMINDER_PREFIXES[reminder_type],
        when=when,
        reminder_type=reminder_type,
    )


def _delete_all(session_id: str) -> list[ScheduleOperation]:
    return [
        ScheduleOperation(type=OperationType.DELETE, session_id=session_id, name_prefix=prefix)
        for prefix in ALL_PREFIXES
    ]


def _plan_create(after: SessionSnapshot, now: datetime) -> list[ScheduleOperation | None]:
    ops: list[ScheduleOperation | None] = []
    if after.sales_start_time:
        ops.append(_action_op(after.id, after.sales_start_time, SessionAction.ON_SALE))
    if after.end_time:
        ops.append(_action_op(after.id, after.end_time, SessionAction.CLOSED))
    if after.start_time:
        ops.append(_reminder_op(after.id, after.start_time, ReminderType.SESSION_START, now))
    if after.sales_start_time:
        ops.append(_reminder_op(after.id, after.sales_start_time, ReminderType.SALE_START, now))
    return ops


def _plan_update(
    before: SessionSnapshot, after: SessionSnapshot, now: datetime
) -> list[ScheduleOperation | None]:
    if after.status == SESSION_STATUS_CANCELLED:
        if before.status != SESSION_STATUS_CANCELLED:
            logger.info("session_cancelled", session_id=after.id)
            return list(_delete_all(after.id))
        return []

    ops: list[ScheduleOperation | None] = []
    if after.sales_start_time and after.sales_start_time != before.sales_start_time:
        ops.append(_action_op(after.id, after.sales_start_time, SessionAction.ON_SALE))
        ops.append(_reminder_op(after.id, after.sales_start_time, ReminderType.SALE_START, now))
    if after.start_time and after.start_time != before.start_time:
        ops.append(_reminder_op(after.id, after.start_time, ReminderType.SESSION_START, now))
    if after.end_time and after.end_time != before.end_time:
        ops.append(_action_op(after.id, after.end_time, SessionAction.CLOSED))
    return ops


def plan_schedule_changes(
    change: SessionChange, now: datetime | None = None
) -> list[ScheduleOperation]:
    """
    Work out which schedules a session change creates, moves or removes.

    Args:
        change: Decoded session change record.
        now: Reference time for skipping reminders that would fire in the past.

    Returns:
        Operations in execution order. Empty for snapshot reads and for
        changes that touch no schedule-relevant field.
    """
    if now is None:
        now = datetime.now(UTC)

    session_id = change.session_id
    if not session_id:
        logger.warning("session_change_without_id", op=change.op)
        return []

    planned: list[ScheduleOperation | None]
    if change.op == "c" and change.after is not None:
        planned = _plan_create(change.after, now)
    elif change.op == "u" and change.before is not None and change.after is not None:
        planned = _plan_update(change.before, change.after, now)
    elif change.op == "d":
        planned = list(_delete_all(session_id))
    else:
        planned = []

    return [op for op in planned if op is not None]


def apply_session_change(
    change: SessionChange,
    service: ScheduleService,
    now: datetime | None = None,
) -> ApplyResult:
    """
    Plan and execute a session change.

    A failed write is logged and recorded; the remaining operations still run.
    """
    result = ApplyResult()

    for op in plan_schedule_changes(change, now=now):
        if op.type == OperationType.DELETE:
            if service.delete_schedule(op.session_id, op.name_prefix):
                result.deleted.append(op.schedule_name)
            else:
                result.failed.append(op.schedule_name)
            continue

        try:
            if op.when is None:
                raise SchedulingError(f"No fire time planned for {op.schedule_name}")
            if op.type == OperationType.SCHEDULE_ACTION and op.action is not None:
                service.schedule_session_action(op.session_id, op.when, op.action)
            elif op.reminder_type is not None:
                service.schedule_reminder(op.session_id, op.when, op.reminder_type)
        except SchedulingError as e:
            logger.error(
                "session_schedule_write_failed",
                session_id=op.session_id,
                schedule_name=op.schedule_name,
                error=str(e),
            )
            result.failed.append(op.schedule_name)
        else:
            result.scheduled.append(op.schedule_name)

    logger.info(
        "session_change_applied",
        session_id=change.session_id,
        op=change.op,
        scheduled=len(result.scheduled),
        deleted=len(result.deleted),
        failed=len(result.failed),
    )
    return result
