"""
Batch processing loop.

Receive a batch, route each message, then delete the acknowledged ones in a
single call. A message is only deleted when its side effect succeeded or can
never succeed; everything else becomes visible again and is redelivered.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from apps.core.logging import bind_contextvars, clear_contextvars, get_logger, unbind_contextvars
from apps.identity.exceptions import TokenFetchError
from apps.identity.tokens import BatchContext
from apps.queues.client import QueueMessage, SQSQueue
from apps.queues.exceptions import QueueDeleteError, QueueReceiveError
from apps.queues.outcomes import Outcome
from apps.queues.router import MessageRouter

logger = get_logger(__name__)

DEFAULT_RECEIVE_ERROR_BACKOFF = 5.0


@dataclass
class BatchResult:
    """What happened to one received batch."""

    received: int = 0
    acknowledged: list[QueueMessage] = field(default_factory=list)
    retried: int = 0
    aborted: bool = False
    delete_failed: bool = False


class BatchProcessor:
    """
    Consumer loop for one queue.

    Clients are passed in already built. The loop owns nothing but its own
    stop check; ``close`` releases the resources handed to it.
    """

    def __init__(
        self,
        name: str,
        queue: SQSQueue,
        router: MessageRouter,
        token_source: Callable[[], str] | None = None,
        receive_error_backoff: float = DEFAULT_RECEIVE_ERROR_BACKOFF,
        sleep: Callable[[float], None] = time.sleep,
        resources: tuple[Any, ...] = (),
    ):
        self.name = name
        self.queue = queue
        self.router = router
        self.token_source = token_source
        self.receive_error_backoff = receive_error_backoff
        self.sleep = sleep
        self.resources = resources

    def run(self, stop_event: threading.Event) -> None:
        """
        Loop until ``stop_event`` is set.

        The event is checked before each receive, never mid-batch, so a batch
        that has started is always finished and acknowledged.
        """
        bind_contextvars(queue=self.name)
        logger.info("consumer_started", queue_url=self.queue.queue_url)
        try:
            while not stop_event.is_set():
                try:
                    self.run_once()
                except Exception:
                    logger.exception("consumer_iteration_error")
                    self.sleep(self.receive_error_backoff)
        finally:
            logger.info("consumer_stopped")
            clear_contextvars()

    def run_once(self) -> int:
        """
        Receive and process a single batch.

        Returns the number of messages received. An empty receive returns
        immediately without sleeping; a failed receive sleeps for the backoff.
        """
        try:
            messages = self.queue.receive_batch()
        except QueueReceiveError as e:
            logger.error("queue_receive_failed", error=str(e), backoff=self.receive_error_backoff)
            self.sleep(self.receive_error_backoff)
            return 0

        if not messages:
            return 0

        result = self.process_batch(messages)
        logger.info(
            "batch_processed",
            received=result.received,
            acknowledged=len(result.acknowledged),
            retried=result.retried,
            aborted=result.aborted,
        )
        return len(messages)

    def process_batch(self, messages: list[QueueMessage]) -> BatchResult:
        """
        Route messages in order, then acknowledge the ones that are done.

        A TokenFetchError stops the batch: the remaining messages are left for
        redelivery, but those already handled are still acknowledged.
        """
        result = BatchResult(received=len(messages))
        batch = BatchContext(self.token_source)

        for message in messages:
            bind_contextvars(message_id=message.message_id)
            try:
                outcome = self.router.route(message, batch)
            except TokenFetchError as e:
                logger.error("batch_aborted_token_unavailable", error=str(e))
                result.aborted = True
                break
            except Exception:
                logger.exception("message_handler_error")
                outcome = Outcome.RETRY
            finally:
                unbind_contextvars("message_id")

            if outcome.acknowledged:
                result.acknowledged.append(message)
            else:
                result.retried += 1

        if result.acknowledged:
            try:
                self.queue.delete_batch(result.acknowledged)
            except QueueDeleteError:
                # Already logged with queue url and count; messages will be redelivered
                result.delete_failed = True

        return result

    def close(self) -> None:
        for resource in self.resources:
            resource.close()
