"""
Builders for reminder test data.
"""

from datetime import UTC, datetime

from apps.reminders.schemas import EventBasicInfo, SessionExtendedInfo, SessionReminderContext, VenueDetails
from apps.subscriptions.schemas import SubscriberRecord

SESSION_START = datetime(2030, 6, 1, 18, 0, tzinfo=UTC)
SESSION_END = datetime(2030, 6, 1, 20, 30, tzinfo=UTC)
SALES_START = datetime(2030, 5, 1, 9, 0, tzinfo=UTC)


def make_subscriber(subscriber_id: int, email: str | None = None, user_id: str | None = None) -> SubscriberRecord:
    return SubscriberRecord(
        subscriber_id=subscriber_id,
        user_id=user_id,
        email=email or f"subscriber{subscriber_id}@example.com",
    )


def session_info(session_id: str = "s-1", event_id: str = "e-1", **overrides) -> SessionExtendedInfo:
    data = {
        "sessionId": session_id,
        "eventId": event_id,
        "eventTitle": "Jazz Night",
        "startTime": SESSION_START.isoformat(),
        "endTime": SESSION_END.isoformat(),
        "salesStartTime": SALES_START.isoformat(),
        "status": "SCHEDULED",
        "sessionType": "PHYSICAL",
        "venueDetails": {"name": "Blue Hall", "address": "1 Main St"},
    }
    data.update(overrides)
    return SessionExtendedInfo.model_validate(data)


def event_info(event_id: str = "e-1", **overrides) -> EventBasicInfo:
    data = {
        "id": event_id,
        "title": "Jazz Night Live",
        "overview": "An evening of jazz",
        "organization": {"id": "o-1", "name": "Blue Notes"},
        "category": {"id": "c-1", "name": "Music"},
    }
    data.update(overrides)
    return EventBasicInfo.model_validate(data)


def reminder_context(**overrides) -> SessionReminderContext:
    data = {
        "session_id": "s-1",
        "event_id": "e-1",
        "event_title": "Jazz Night",
        "start_time": SESSION_START,
        "end_time": SESSION_END,
        "sales_start_time": SALES_START,
        "venue": VenueDetails(name="Blue Hall", address="1 Main St"),
    }
    data.update(overrides)
    return SessionReminderContext(**data)
