"""
Message router - decode, then dispatch to the handler registered for the arm.
"""

from collections.abc import Callable, Mapping
from typing import Any

from apps.core.logging import get_logger
from apps.identity.tokens import BatchContext
from apps.queues.client import QueueMessage
from apps.queues.exceptions import MalformedMessageError
from apps.queues.messages import decode_message
from apps.queues.outcomes import Outcome

logger = get_logger(__name__)

Handler = Callable[[Any, BatchContext], Outcome]


class MessageRouter:
    """
    Routes messages for one queue.

    ``handlers`` maps a decoded message type to the callable that executes it.
    Malformed messages, and arms with no handler on this queue, are
    acknowledged without any side effect.
    """

    def __init__(self, handlers: Mapping[type, Handler]):
        self.handlers = dict(handlers)

    def route(self, message: QueueMessage, batch: BatchContext) -> Outcome:
        try:
            decoded = decode_message(message.body)
        except MalformedMessageError as e:
            logger.warning("message_malformed", error=str(e), body=message.body)
            return Outcome.MALFORMED

        handler = self.handlers.get(type(decoded))
        if handler is None:
            logger.warning(
                "message_unhandled",
                message_type=type(decoded).__name__,
                body=message.body,
            )
            return Outcome.MALFORMED

        return handler(decoded, batch)
