"""
Tests for structured logging configuration.
"""

import logging

import structlog
from structlog.contextvars import get_contextvars

from apps.core.logging import (
    MAX_BODY_LENGTH,
    SERVICE_NAME,
    _add_service_name,
    _truncate_message_body,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
    unbind_contextvars,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_json_format(self):
        """Test that JSON format configuration works."""
        configure_logging(json_format=True, log_level="INFO")

        config = structlog.get_config()
        assert config is not None
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_console_format(self):
        """Test that console format configuration works."""
        configure_logging(json_format=False, log_level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_quiets_aws_and_http_libraries(self):
        """botocore and httpx never log below WARNING."""
        configure_logging(json_format=True, log_level="DEBUG")

        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(json_format=True, log_level="LOUD")

        assert logging.getLogger().level == logging.INFO


class TestProcessors:
    """Tests for the custom processors."""

    def test_adds_service_name(self):
        event_dict = _add_service_name(None, "info", {"event": "x"})  # type: ignore[arg-type]

        assert event_dict["service"] == SERVICE_NAME

    def test_keeps_explicit_service_name(self):
        event_dict = _add_service_name(None, "info", {"service": "other"})  # type: ignore[arg-type]

        assert event_dict["service"] == "other"

    def test_truncates_long_body(self):
        """Malformed payloads are cut to MAX_BODY_LENGTH characters."""
        body = "x" * (MAX_BODY_LENGTH + 100)

        event_dict = _truncate_message_body(None, "warning", {"body": body})  # type: ignore[arg-type]

        assert event_dict["body"] == "x" * MAX_BODY_LENGTH + "..."

    def test_leaves_short_body(self):
        event_dict = _truncate_message_body(None, "warning", {"body": "{}"})  # type: ignore[arg-type]

        assert event_dict["body"] == "{}"


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_bound_logger(self):
        """Test that get_logger returns a structlog logger."""
        logger = get_logger("test.module")
        assert logger is not None


class TestContextVars:
    """Tests for context variable binding."""

    def setup_method(self):
        """Clear context before each test."""
        clear_contextvars()

    def teardown_method(self):
        """Clear context after each test."""
        clear_contextvars()

    def test_bind_contextvars_adds_context(self):
        """Test that bind_contextvars adds context to logs."""
        bind_contextvars(queue="session-scheduling", message_id="m-1")

        ctx = get_contextvars()
        assert ctx.get("queue") == "session-scheduling"
        assert ctx.get("message_id") == "m-1"

    def test_unbind_contextvars_keeps_other_keys(self):
        """Unbinding message_id leaves the queue binding in place."""
        bind_contextvars(queue="session-reminders", message_id="m-2")

        unbind_contextvars("message_id")

        ctx = get_contextvars()
        assert ctx.get("queue") == "session-reminders"
        assert "message_id" not in ctx

    def test_clear_contextvars_removes_context(self):
        """Test that clear_contextvars removes all bound context."""
        bind_contextvars(queue="trending-job")
        clear_contextvars()

        assert get_contextvars() == {}


class TestLogOutput:
    """Tests for actual log output."""

    def setup_method(self):
        """Configure logging and clear context before each test."""
        clear_contextvars()
        configure_logging(json_format=True, log_level="DEBUG")

    def teardown_method(self):
        """Clear context after each test."""
        clear_contextvars()

    def test_json_log_output_format(self, caplog):
        """Test that JSON logs are properly formatted."""
        logger = get_logger("test.json_output")
        bind_contextvars(queue="session-scheduling")

        with caplog.at_level(logging.DEBUG, logger="test.json_output"):
            logger.info("schedule_created", schedule_name="session-onsale-1")

        assert len(caplog.records) > 0
        assert "schedule_created" in caplog.text

    def test_log_with_exception(self, caplog):
        """Test that exceptions are properly logged."""
        logger = get_logger("test.exception")

        with caplog.at_level(logging.DEBUG, logger="test.exception"):
            try:
                raise ValueError("Test error")
            except ValueError:
                logger.exception("consumer_iteration_error")

        assert len(caplog.records) > 0
        output = caplog.text
        assert "consumer_iteration_error" in output or "ValueError" in output
