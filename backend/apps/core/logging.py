"""
Structured logging configuration using structlog.

Every consumer loop and HTTP endpoint logs through this module so that queue
activity can be searched by field rather than by message text.

Usage:
    from apps.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("schedule_created", schedule_name="session-onsale-123")

Field conventions:
    - service: Always "session-scheduler"
    - queue: Logical queue name bound by the consumer loop
    - message_id: Queue message id bound while a message is routed
    - session_id: Session the log line concerns
    - body: Raw message body, truncated to MAX_BODY_LENGTH characters
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "session-scheduler"
MAX_BODY_LENGTH = 500


def _add_service_name(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every record with the service name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _truncate_message_body(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Truncate raw queue bodies so a malformed payload cannot flood the log.
    """
    body = event_dict.get("body")
    if isinstance(body, str) and len(body) > MAX_BODY_LENGTH:
        event_dict["body"] = body[:MAX_BODY_LENGTH] + "..."
    return event_dict


def configure_logging(json_format: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog for the application.

    Uses stdlib integration for compatibility with Django, boto3 and httpx.

    Args:
        json_format: If True, output JSON (production). If False, pretty console output (development).
        log_level: Minimum log level to output.
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    # Processors that run before passing to stdlib
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_name,
        _truncate_message_body,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    # botocore logs every retry at INFO
    logging.getLogger("botocore").setLevel(max(log_level_int, logging.WARNING))
    logging.getLogger("httpx").setLevel(max(log_level_int, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module.
    """
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """
    Bind key-value pairs to the current context.

    The consumer loop binds ``queue`` once per thread and ``message_id`` per
    message, so handlers do not need to pass them along.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_contextvars(*keys: str) -> None:
    """Remove keys from the current context, leaving the rest bound."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_contextvars() -> None:
    """
    Clear all bound context variables.

    Call this when a consumer thread exits to prevent context leakage.
    """
    structlog.contextvars.clear_contextvars()
