"""
Scheduling schemas - queue payloads and session change records.

Payloads are emitted with camelCase keys. Both camelCase and snake_case are
accepted when decoding, since older producers wrote snake_case.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from ninja import Schema
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from apps.scheduling.constants import REMINDER_TEMPLATE_ID, SessionAction, notification_id


def _alias(camel: str, snake: str) -> dict[str, Any]:
    return {
        "validation_alias": AliasChoices(camel, snake),
        "serialization_alias": camel,
    }


class SessionStatusMessage(BaseModel):
    """Session-scheduling queue payload: move a session to a new state."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    session_id: str = Field(min_length=1, **_alias("sessionId", "session_id"))
    action: SessionAction


class ReminderMessage(BaseModel):
    """
    Reminders queue payload.

    ``reminder_type`` stays a plain string so that an unrecognised type can be
    acknowledged by the aggregator instead of failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    session_id: str = Field(default="", **_alias("sessionId", "session_id"))
    reminder_type: str = Field(**_alias("reminderType", "reminder_type"))
    template_id: str = Field(default=REMINDER_TEMPLATE_ID, **_alias("templateId", "template_id"))
    notification_id: str = Field(default="", **_alias("notificationId", "notification_id"))

    @classmethod
    def for_session(cls, session_id: str, reminder_type: str) -> "ReminderMessage":
        return cls(
            session_id=session_id,
            reminder_type=reminder_type,
            template_id=REMINDER_TEMPLATE_ID,
            notification_id=notification_id(reminder_type, session_id),
        )


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SessionSnapshot(BaseModel):
    """
    One side (before/after) of a session row change.

    Timestamps arrive as epoch microseconds from change-data-capture, or as
    ISO-8601 strings. Zero means unset.
    """

    id: str
    event_id: str | None = Field(default=None, validation_alias=AliasChoices("event_id", "eventId"))
    status: str = ""
    start_time: datetime | None = Field(
        default=None, validation_alias=AliasChoices("start_time", "startTime")
    )
    end_time: datetime | None = Field(
        default=None, validation_alias=AliasChoices("end_time", "endTime")
    )
    sales_start_time: datetime | None = Field(
        default=None, validation_alias=AliasChoices("sales_start_time", "salesStartTime")
    )

    @field_validator("start_time", "end_time", "sales_start_time", mode="before")
    @classmethod
    def parse_microseconds(cls, value: Any) -> Any:
        if value is None or value == "" or value == 0:
            return None
        if isinstance(value, bool):
            raise ValueError("timestamp must not be a boolean")
        if isinstance(value, int | float):
            return datetime.fromtimestamp(value / 1_000_000, tz=UTC)
        return value

    @field_validator("start_time", "end_time", "sales_start_time", mode="after")
    @classmethod
    def normalize_timezone(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)


class SessionChange(BaseModel):
    """
    Change record for a session row.

    Accepts either the bare payload or the full envelope ``{"payload": {...}}``.
    """

    op: Literal["c", "u", "d", "r"]
    before: SessionSnapshot | None = None
    after: SessionSnapshot | None = None

    @model_validator(mode="before")
    @classmethod
    def unwrap_envelope(cls, data: Any) -> Any:
        if isinstance(data, dict) and "op" not in data and isinstance(data.get("payload"), dict):
            return data["payload"]
        return data

    @property
    def session_id(self) -> str:
        if self.after is not None:
            return self.after.id
        if self.before is not None:
            return self.before.id
        return ""


class SessionChangeResult(Schema):
    """Outcome of applying a session change to the trigger store."""

    session_id: str = Field(description="Session the change applied to")
    op: str = Field(description="Change operation: c, u, d or r")
    scheduled: list[str] = Field(default_factory=list, description="Schedules created or updated")
    deleted: list[str] = Field(default_factory=list, description="Schedules deleted")
    failed: list[str] = Field(default_factory=list, description="Schedules that could not be written")
