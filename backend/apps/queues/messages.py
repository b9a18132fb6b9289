"""
Message decoding.

Every body decodes to exactly one arm of ``Message``. Bodies that are not JSON
objects, or that match an arm but fail its validation, raise
MalformedMessageError. Valid JSON that matches no arm becomes UnknownMessage.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from apps.queues.exceptions import MalformedMessageError
from apps.scheduling.constants import SessionAction
from apps.scheduling.schemas import ReminderMessage, SessionStatusMessage
from apps.trending.schemas import TRENDING_ACTION, TrendingMessage

REMINDER_TYPE_KEYS = ("reminderType", "reminder_type")
SESSION_ACTIONS = frozenset(action.value for action in SessionAction)


@dataclass(frozen=True)
class UnknownMessage:
    """A JSON object that matches no known payload."""

    data: dict[str, Any] = field(default_factory=dict)


Message = SessionStatusMessage | ReminderMessage | TrendingMessage | UnknownMessage


def decode_message(body: str) -> Message:
    """
    Decode a raw queue body.

    Raises:
        MalformedMessageError: Not JSON, not an object, or invalid for its arm.
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedMessageError(f"Message body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessageError(f"Message body must be a JSON object, got {type(data).__name__}")

    action = data.get("action")
    try:
        if any(key in data for key in REMINDER_TYPE_KEYS):
            return ReminderMessage.model_validate(data)
        if isinstance(action, str) and action in SESSION_ACTIONS:
            return SessionStatusMessage.model_validate(data)
        if action == TRENDING_ACTION:
            return TrendingMessage.model_validate(data)
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid message payload: {e}") from e

    return UnknownMessage(data=data)
