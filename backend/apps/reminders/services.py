"""
Reminder aggregator.

Assembles session and event details, gathers everyone subscribed to the
session or its event, and sends one email per subscriber.
"""

from collections.abc import Callable

from django.db import DatabaseError

from apps.core.logging import get_logger
from apps.identity.keycloak_client import KeycloakClient, UserDetails
from apps.identity.tokens import BatchContext
from apps.queues.outcomes import Outcome
from apps.reminders.aggregation import merge_subscribers
from apps.reminders.emails import ReminderMailer, UserLookup
from apps.reminders.exceptions import (
    QueryServiceError,
    ReminderDeliveryError,
    ResourceNotFoundError,
)
from apps.reminders.query_client import EventQueryClient
from apps.reminders.schemas import SessionReminderContext
from apps.scheduling.constants import ReminderType
from apps.scheduling.schemas import ReminderMessage
from apps.subscriptions.schemas import SubscriberRecord
from apps.subscriptions.services import get_event_subscribers, get_session_subscribers

logger = get_logger(__name__)

SubscriberSource = Callable[[str], list[SubscriberRecord]]


class ReminderAggregator:
    """Prepares and sends one reminder for one session."""

    def __init__(
        self,
        query_client: EventQueryClient,
        mailer: ReminderMailer,
        session_subscribers: SubscriberSource = get_session_subscribers,
        event_subscribers: SubscriberSource = get_event_subscribers,
    ):
        self.query_client = query_client
        self.mailer = mailer
        self.session_subscribers = session_subscribers
        self.event_subscribers = event_subscribers

    def build_context(self, session_id: str) -> SessionReminderContext:
        """
        Load session details, enriched with event details when available.

        Raises:
            ResourceNotFoundError: The session does not exist.
            QueryServiceError: The session could not be loaded.
        """
        session = self.query_client.get_session_extended_info(session_id)
        context = SessionReminderContext.from_session(session)

        if context.event_id:
            try:
                event = self.query_client.get_event_basic_info(context.event_id)
            except (ResourceNotFoundError, QueryServiceError) as e:
                logger.warning(
                    "reminder_event_details_unavailable",
                    session_id=session_id,
                    event_id=context.event_id,
                    error=str(e),
                )
            else:
                context.enrich(event)

        return context

    def collect_subscribers(self, context: SessionReminderContext) -> list[SubscriberRecord]:
        """
        Session subscribers plus event subscribers, one entry per subscriber.

        Raises:
            DatabaseError: If the session subscriber lookup fails.
        """
        session_subscribers = self.session_subscribers(context.session_id)

        event_subscribers: list[SubscriberRecord] = []
        if context.event_id:
            try:
                event_subscribers = self.event_subscribers(context.event_id)
            except DatabaseError as e:
                logger.warning(
                    "reminder_event_subscribers_unavailable",
                    session_id=context.session_id,
                    event_id=context.event_id,
                    error=str(e),
                )

        return merge_subscribers(session_subscribers, event_subscribers)

    def prepare_and_send(
        self,
        session_id: str,
        reminder_type: str,
        mailer: ReminderMailer | None = None,
    ) -> Outcome:
        """
        Send a reminder for a session.

        Returns:
            MALFORMED for an empty session id. ALREADY_RESOLVED when the
            reminder type is unknown or the session no longer exists.
            RETRY when session details, session subscribers or every email
            failed. APPLIED otherwise, including when nobody is subscribed.
        """
        if not session_id:
            logger.warning("reminder_without_session_id", reminder_type=reminder_type)
            return Outcome.MALFORMED

        try:
            kind = ReminderType(reminder_type)
        except ValueError:
            logger.warning(
                "reminder_type_unknown",
                session_id=session_id,
                reminder_type=reminder_type,
            )
            return Outcome.ALREADY_RESOLVED

        try:
            context = self.build_context(session_id)
        except ResourceNotFoundError:
            logger.info("reminder_session_not_found", session_id=session_id)
            return Outcome.ALREADY_RESOLVED
        except QueryServiceError as e:
            logger.warning("reminder_session_lookup_failed", session_id=session_id, error=str(e))
            return Outcome.RETRY

        try:
            subscribers = self.collect_subscribers(context)
        except DatabaseError as e:
            logger.error("reminder_subscriber_lookup_failed", session_id=session_id, error=str(e))
            return Outcome.RETRY

        if not subscribers:
            logger.info("reminder_no_subscribers", session_id=session_id, reminder_type=str(kind))
            return Outcome.APPLIED

        try:
            (mailer or self.mailer).send(kind, subscribers, context)
        except ReminderDeliveryError as e:
            logger.error(
                "reminder_delivery_failed",
                session_id=session_id,
                reminder_type=str(kind),
                attempted=e.attempted,
            )
            return Outcome.RETRY

        return Outcome.APPLIED


def batch_user_lookup(identity: KeycloakClient, batch: BatchContext) -> UserLookup:
    """
    Look users up with the batch's service token.

    A token failure surfaces as an IdentityError to the caller, which falls
    back to a name derived from the email address rather than aborting.
    """

    def lookup(user_id: str) -> UserDetails:
        return identity.get_user(user_id, token=batch.bearer_token())

    return lookup


class ReminderHandler:
    """Handles messages from the session-reminders queue."""

    def __init__(
        self,
        aggregator: ReminderAggregator,
        identity: KeycloakClient | None = None,
    ):
        self.aggregator = aggregator
        self.identity = identity

    def __call__(self, message: ReminderMessage, batch: BatchContext) -> Outcome:
        mailer = None
        if self.identity is not None:
            base = self.aggregator.mailer
            mailer = ReminderMailer(
                user_lookup=batch_user_lookup(self.identity, batch),
                from_email=base.from_email,
                frontend_url=base.frontend_url,
            )

        outcome = self.aggregator.prepare_and_send(
            message.session_id, message.reminder_type, mailer=mailer
        )
        logger.info(
            "reminder_processed",
            session_id=message.session_id,
            reminder_type=message.reminder_type,
            notification_id=message.notification_id,
            outcome=str(outcome),
        )
        return outcome

