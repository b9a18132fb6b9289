"""
Reminder emails.

Rendered from Django templates and sent through django.core.mail, so the SMTP
backend in production and the locmem backend in tests share one code path.
"""

import smtplib
from collections.abc import Callable
from datetime import datetime
from urllib.parse import urlencode

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string

from apps.core.logging import get_logger
from apps.identity.exceptions import IdentityError
from apps.identity.keycloak_client import UserDetails
from apps.reminders.exceptions import ReminderDeliveryError
from apps.reminders.schemas import SessionReminderContext
from apps.scheduling.constants import ReminderType
from apps.subscriptions.schemas import SubscriberRecord

logger = get_logger(__name__)

UserLookup = Callable[[str], UserDetails]

TEMPLATES: dict[ReminderType, str] = {
    ReminderType.SESSION_START: "reminders/session_start",
    ReminderType.SALE_START: "reminders/sale_start",
}


def build_subject(reminder_type: ReminderType, context: SessionReminderContext) -> str:
    if reminder_type == ReminderType.SESSION_START:
        return f"Reminder: {context.event_title or 'Your event'} is tomorrow!"
    return f"Tickets for {context.event_title or 'this event'} will be available soon!"


def format_duration(start: datetime | None, end: datetime | None) -> str:
    """Human duration such as 2 hours 30 minutes. Empty when either end is unknown."""
    if start is None or end is None or end <= start:
        return ""
    total_minutes = int((end - start).total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours and minutes:
        return f"{hours} hours {minutes} minutes"
    if hours:
        return f"{hours} hours"
    return f"{minutes} minutes"


def google_calendar_url(context: SessionReminderContext) -> str:
    if context.start_time is None or context.end_time is None:
        return ""
    stamp = "%Y%m%dT%H%M%SZ"
    query = urlencode(
        {
            "action": "TEMPLATE",
            "text": context.event_title,
            "dates": f"{context.start_time.strftime(stamp)}/{context.end_time.strftime(stamp)}",
            "details": context.event_overview or context.event_title,
            "location": context.venue_display,
        }
    )
    return f"https://calendar.google.com/calendar/render?{query}"


def session_url(context: SessionReminderContext, frontend_url: str) -> str:
    return f"{frontend_url.rstrip('/')}/events/{context.event_id}/sessions/{context.session_id}"


def resolve_display_name(subscriber: SubscriberRecord, user_lookup: UserLookup | None) -> str:
    """
    Name to greet a subscriber by.

    Prefers the identity provider's first/last name, falling back to the
    local part of the email address.
    """
    if subscriber.user_id and user_lookup is not None:
        try:
            name = user_lookup(subscriber.user_id).display_name
        except IdentityError as e:
            logger.info(
                "subscriber_name_lookup_failed",
                subscriber_id=subscriber.subscriber_id,
                error=str(e),
            )
        else:
            if name:
                return name
    return subscriber.email.split("@", 1)[0]


class ReminderMailer:
    """Sends one reminder email per subscriber."""

    def __init__(
        self,
        user_lookup: UserLookup | None = None,
        from_email: str | None = None,
        frontend_url: str | None = None,
    ):
        self.user_lookup = user_lookup
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self.frontend_url = frontend_url or settings.FRONTEND_URL

    def build_message(
        self,
        reminder_type: ReminderType,
        subscriber: SubscriberRecord,
        context: SessionReminderContext,
    ) -> EmailMultiAlternatives:
        template = TEMPLATES[reminder_type]
        template_context = {
            "subscriber_name": resolve_display_name(subscriber, self.user_lookup),
            "reminder": context,
            "event_title": context.event_title or "Your event",
            "duration": format_duration(context.start_time, context.end_time),
            "calendar_url": google_calendar_url(context),
            "session_url": session_url(context, self.frontend_url),
            "brand_name": getattr(settings, "EMAIL_BRAND_NAME", "Ticketly"),
        }
        message = EmailMultiAlternatives(
            subject=build_subject(reminder_type, context),
            body=render_to_string(f"{template}.txt", template_context),
            from_email=self.from_email,
            to=[subscriber.email],
        )
        message.attach_alternative(render_to_string(f"{template}.html", template_context), "text/html")
        return message

    def send(
        self,
        reminder_type: ReminderType,
        subscribers: list[SubscriberRecord],
        context: SessionReminderContext,
    ) -> int:
        """
        Send the reminder to every subscriber over one connection.

        All messages are rendered before the first one goes out, so a render
        or lookup error leaves nothing half-sent. Per-recipient failures are
        logged and skipped.

        Returns:
            Number of emails sent.

        Raises:
            ReminderDeliveryError: If there were recipients but none succeeded.
        """
        messages = [
            (subscriber, self.build_message(reminder_type, subscriber, context))
            for subscriber in subscribers
        ]

        sent = 0
        try:
            with get_connection() as connection:
                for subscriber, message in messages:
                    message.connection = connection
                    try:
                        message.send()
                    except (smtplib.SMTPException, OSError) as e:
                        logger.warning(
                            "reminder_email_failed",
                            session_id=context.session_id,
                            subscriber_id=subscriber.subscriber_id,
                            error=str(e),
                        )
                        continue
                    sent += 1
        except (smtplib.SMTPException, OSError) as e:
            logger.error("reminder_mail_connection_failed", session_id=context.session_id, error=str(e))

        logger.info(
            "reminder_emails_sent",
            session_id=context.session_id,
            reminder_type=str(reminder_type),
            sent=sent,
            attempted=len(subscribers),
        )
        if subscribers and sent == 0:
            raise ReminderDeliveryError(
                f"No {reminder_type} reminder could be delivered for session {context.session_id}",
                attempted=len(subscribers),
            )
        return sent
