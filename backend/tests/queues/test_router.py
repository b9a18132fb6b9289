"""
Tests for the message router.
"""

from unittest.mock import MagicMock

import pytest

from apps.identity.tokens import BatchContext
from apps.queues.messages import UnknownMessage
from apps.queues.outcomes import Outcome
from apps.queues.router import MessageRouter
from apps.scheduling.schemas import ReminderMessage, SessionStatusMessage
from tests.queues.factories import make_queue_message


class TestMessageRouter:
    """Tests for MessageRouter.route."""

    def test_dispatches_to_registered_handler(self):
        handler = MagicMock(return_value=Outcome.APPLIED)
        router = MessageRouter({SessionStatusMessage: handler})
        batch = BatchContext()

        outcome = router.route(make_queue_message({"sessionId": "s-1", "action": "ON_SALE"}), batch)

        assert outcome == Outcome.APPLIED
        decoded, passed_batch = handler.call_args.args
        assert decoded.session_id == "s-1"
        assert passed_batch is batch

    def test_malformed_body_is_acknowledged_without_side_effect(self):
        handler = MagicMock()
        router = MessageRouter({SessionStatusMessage: handler})

        outcome = router.route(make_queue_message("{not json"), BatchContext())

        assert outcome == Outcome.MALFORMED
        handler.assert_not_called()

    def test_unhandled_type_is_acknowledged(self):
        """A reminder landing on the session queue is dropped, not retried."""
        handler = MagicMock()
        router = MessageRouter({SessionStatusMessage: handler})

        outcome = router.route(
            make_queue_message({"sessionId": "s-1", "reminderType": "SESSION_START"}), BatchContext()
        )

        assert outcome == Outcome.MALFORMED
        handler.assert_not_called()

    def test_unknown_message_routes_when_registered(self):
        handler = MagicMock(return_value=Outcome.APPLIED)
        router = MessageRouter({UnknownMessage: handler, ReminderMessage: MagicMock()})

        assert router.route(make_queue_message({"anything": True}), BatchContext()) == Outcome.APPLIED
        handler.assert_called_once()

    def test_handler_exceptions_propagate(self):
        """The processor decides what an unexpected error means."""
        handler = MagicMock(side_effect=RuntimeError("bug"))
        router = MessageRouter({SessionStatusMessage: handler})

        with pytest.raises(RuntimeError):
            router.route(make_queue_message({"sessionId": "s-1", "action": "CLOSED"}), BatchContext())
