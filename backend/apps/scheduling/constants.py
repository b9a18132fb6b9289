"""
Constants for scheduling app.

Schedule names are ``prefix + session_id``; the prefix identifies what the
schedule fires.
"""

from datetime import timedelta
from enum import StrEnum


class SessionAction(StrEnum):
    """Session state transitions fired by the session-scheduling queue."""

    ON_SALE = "ON_SALE"
    CLOSED = "CLOSED"


class ReminderType(StrEnum):
    """Reminder emails fired by the reminders queue."""

    SESSION_START = "SESSION_START"
    SALE_START = "SALE_START"


SESSION_STATUS_CANCELLED = "CANCELLED"

ACTION_PREFIXES: dict[SessionAction, str] = {
    SessionAction.ON_SALE: "session-onsale-",
    SessionAction.CLOSED: "session-closed-",
}

REMINDER_PREFIXES: dict[ReminderType, str] = {
    ReminderType.SESSION_START: "session-reminder-",
    ReminderType.SALE_START: "session-sale-reminder-",
}

ALL_PREFIXES: tuple[str, ...] = (*ACTION_PREFIXES.values(), *REMINDER_PREFIXES.values())

REMINDER_TEMPLATE_ID = "session-reminder-template"

# How long before the trigger time each reminder fires
REMINDER_LEAD_TIMES: dict[ReminderType, timedelta] = {
    ReminderType.SESSION_START: timedelta(days=1),
    ReminderType.SALE_START: timedelta(minutes=30),
}


def notification_id(reminder_type: str, session_id: str) -> str:
    """Deterministic id so downstream consumers can drop repeated deliveries."""
    return f"reminder-{reminder_type}-{session_id}"
