"""
Trigger store adapter - one-shot schedules in AWS EventBridge Scheduler.

Schedules are keyed by name (``prefix + session_id``). Creating a schedule that
already exists updates it in place, so repeated upserts converge on a single
live schedule whose trigger time reflects the latest call.
"""

import json
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from pydantic import BaseModel

from apps.core.aws import client_error_code, get_aws_client
from apps.core.logging import get_logger
from apps.scheduling.constants import (
    ACTION_PREFIXES,
    REMINDER_PREFIXES,
    ReminderType,
    SessionAction,
)
from apps.scheduling.exceptions import SchedulingError
from apps.scheduling.schemas import ReminderMessage, SessionStatusMessage

logger = get_logger(__name__)

CONFLICT_ERROR = "ConflictException"
NOT_FOUND_ERROR = "ResourceNotFoundException"


def format_schedule_expression(when: datetime) -> str:
    """
    Build a one-shot ``at()`` expression in UTC at second precision.

    Naive datetimes are taken to be UTC already.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return f"at({when.astimezone(UTC).strftime('%Y-%m-%dT%H:%M:%S')})"


class ScheduleService:
    """Creates, updates and deletes named one-shot schedules."""

    def __init__(
        self,
        client: Any,
        group_name: str,
        role_arn: str,
        session_queue_arn: str,
        reminder_queue_arn: str,
    ):
        self.client = client
        self.group_name = group_name
        self.role_arn = role_arn
        self.session_queue_arn = session_queue_arn
        self.reminder_queue_arn = reminder_queue_arn

    def upsert_schedule(
        self,
        session_id: str,
        schedule_time: datetime,
        name_prefix: str,
        target_arn: str,
        payload: BaseModel | dict[str, Any],
    ) -> str:
        """
        Create the schedule, or update it if the name is already taken.

        Returns:
            The schedule name.

        Raises:
            SchedulingError: If create (other than a conflict) or update fails.
        """
        name = f"{name_prefix}{session_id}"
        if isinstance(payload, BaseModel):
            input_json = payload.model_dump_json(by_alias=True)
        else:
            input_json = json.dumps(payload)

        params = {
            "Name": name,
            "GroupName": self.group_name,
            "ScheduleExpression": format_schedule_expression(schedule_time),
            "ScheduleExpressionTimezone": "UTC",
            "FlexibleTimeWindow": {"Mode": "OFF"},
            "ActionAfterCompletion": "DELETE",
            "Target": {
                "Arn": target_arn,
                "RoleArn": self.role_arn,
                "Input": input_json,
            },
        }

        try:
            self.client.create_schedule(**params)
            logger.info(
                "schedule_created",
                schedule_name=name,
                expression=params["ScheduleExpression"],
            )
            return name
        except ClientError as e:
            code = client_error_code(e)
            if code != CONFLICT_ERROR:
                logger.error("schedule_create_failed", schedule_name=name, error_code=code)
                raise SchedulingError(f"Failed to create schedule {name}: {e}", name, code) from e
        except BotoCoreError as e:
            logger.error("schedule_create_failed", schedule_name=name, error=str(e))
            raise SchedulingError(f"Failed to create schedule {name}: {e}", name) from e

        # Name already taken: replace trigger time and payload in place
        try:
            self.client.update_schedule(**params)
        except ClientError as e:
            code = client_error_code(e)
            logger.error("schedule_update_failed", schedule_name=name, error_code=code)
            raise SchedulingError(f"Failed to update schedule {name}: {e}", name, code) from e
        except BotoCoreError as e:
            logger.error("schedule_update_failed", schedule_name=name, error=str(e))
            raise SchedulingError(f"Failed to update schedule {name}: {e}", name) from e

        logger.info(
            "schedule_updated",
            schedule_name=name,
            expression=params["ScheduleExpression"],
        )
        return name

    def schedule_session_action(
        self, session_id: str, when: datetime, action: SessionAction
    ) -> str:
        """Schedule an ON_SALE or CLOSED transition on the session-scheduling queue."""
        return self.upsert_schedule(
            session_id,
            when,
            ACTION_PREFIXES[action],
            self.session_queue_arn,
            SessionStatusMessage(session_id=session_id, action=action),
        )

    def schedule_reminder(
        self, session_id: str, when: datetime, reminder_type: ReminderType
    ) -> str:
        """Schedule a reminder email trigger on the reminders queue."""
        return self.upsert_schedule(
            session_id,
            when,
            REMINDER_PREFIXES[reminder_type],
            self.reminder_queue_arn,
            ReminderMessage.for_session(session_id, reminder_type),
        )

    def delete_schedule(self, session_id: str, name_prefix: str) -> bool:
        """
        Delete a schedule. Never raises.

        A missing schedule counts as deleted: it may have fired already.
        Returns False only when the schedule may still exist.
        """
        name = f"{name_prefix}{session_id}"
        try:
            self.client.delete_schedule(Name=name, GroupName=self.group_name)
        except ClientError as e:
            code = client_error_code(e)
            if code == NOT_FOUND_ERROR:
                logger.info("schedule_already_gone", schedule_name=name)
                return True
            logger.error("schedule_delete_failed", schedule_name=name, error_code=code)
            return False
        except BotoCoreError as e:
            logger.error("schedule_delete_failed", schedule_name=name, error=str(e))
            return False

        logger.info("schedule_deleted", schedule_name=name)
        return True


@lru_cache(maxsize=1)
def get_schedule_service() -> ScheduleService:
    """Get the schedule service configured from Django settings (singleton)."""
    return ScheduleService(
        client=get_aws_client("scheduler"),
        group_name=settings.SCHEDULER_GROUP_NAME,
        role_arn=settings.SCHEDULER_ROLE_ARN,
        session_queue_arn=settings.SESSION_SCHEDULING_QUEUE_ARN,
        reminder_queue_arn=settings.SESSION_REMINDERS_QUEUE_ARN,
    )
