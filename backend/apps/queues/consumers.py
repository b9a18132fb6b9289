"""
Consumer wiring - one BatchProcessor per queue.

Each processor gets its own HTTP client and Keycloak client. boto3 clients
are shared across threads.
"""

from collections.abc import Callable

from django.conf import settings

from apps.core.aws import get_aws_client
from apps.core.http import build_http_client
from apps.identity.keycloak_client import build_keycloak_client
from apps.queues.client import SQSQueue
from apps.queues.messages import UnknownMessage
from apps.queues.processor import BatchProcessor
from apps.queues.router import Handler, MessageRouter
from apps.reminders.emails import ReminderMailer
from apps.reminders.query_client import EventQueryClient
from apps.reminders.services import ReminderAggregator, ReminderHandler
from apps.scheduling.schemas import ReminderMessage, SessionStatusMessage
from apps.sessions.client import EventServiceClient
from apps.sessions.handlers import SessionActionHandler
from apps.trending.schemas import TrendingMessage
from apps.trending.services import TrendingJobHandler

SESSION_SCHEDULING = "session-scheduling"
SESSION_REMINDERS = "session-reminders"
TRENDING_JOB = "trending-job"

QUEUE_NAMES = (SESSION_SCHEDULING, SESSION_REMINDERS, TRENDING_JOB)


def _session_handlers(http, identity) -> dict[type, Handler]:
    client = EventServiceClient(http, settings.EVENT_SERVICE_URL)
    return {SessionStatusMessage: SessionActionHandler(client)}


def _reminder_handlers(http, identity) -> dict[type, Handler]:
    aggregator = ReminderAggregator(
        query_client=EventQueryClient(http, settings.EVENT_QUERY_SERVICE_URL),
        mailer=ReminderMailer(),
    )
    return {ReminderMessage: ReminderHandler(aggregator, identity=identity)}


def _trending_handlers(http, identity) -> dict[type, Handler]:
    handler = TrendingJobHandler(http, settings.EVENT_QUERY_SERVICE_URL)
    # Any body on this queue is a trigger, whatever it decodes to
    return {TrendingMessage: handler, UnknownMessage: handler}


HANDLER_FACTORIES: dict[str, Callable[..., dict[type, Handler]]] = {
    SESSION_SCHEDULING: _session_handlers,
    SESSION_REMINDERS: _reminder_handlers,
    TRENDING_JOB: _trending_handlers,
}


def build_processor(queue_name: str) -> BatchProcessor:
    """
    Build the consumer for a named queue.

    Raises:
        ValueError: Unknown queue name, or no URL configured for it.
    """
    if queue_name not in HANDLER_FACTORIES:
        raise ValueError(f"Unknown queue: {queue_name}. Choose from {', '.join(QUEUE_NAMES)}")

    queue_url = settings.QUEUE_URLS.get(queue_name)
    if not queue_url:
        raise ValueError(f"No URL configured for queue {queue_name}")

    http = build_http_client()
    identity = build_keycloak_client(http)
    handlers = HANDLER_FACTORIES[queue_name](http, identity)

    queue = SQSQueue(
        client=get_aws_client("sqs"),
        queue_url=queue_url,
        wait_seconds=settings.SQS_WAIT_TIME_SECONDS,
        max_messages=settings.SQS_MAX_MESSAGES,
    )
    return BatchProcessor(
        name=queue_name,
        queue=queue,
        router=MessageRouter(handlers),
        token_source=identity.fetch_service_token,
        receive_error_backoff=settings.RECEIVE_ERROR_BACKOFF_SECONDS,
        resources=(http,),
    )
