"""
Tests for outcome classification.
"""

import pytest

from apps.queues.outcomes import Outcome, TransportErrorKind, classify_session_response


class TestOutcome:
    """Tests for Outcome.acknowledged."""

    def test_only_retry_is_not_acknowledged(self):
        assert Outcome.APPLIED.acknowledged
        assert Outcome.ALREADY_RESOLVED.acknowledged
        assert Outcome.MALFORMED.acknowledged
        assert not Outcome.RETRY.acknowledged


class TestClassifySessionResponse:
    """Tests for classify_session_response."""

    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [
            (200, Outcome.APPLIED),
            (404, Outcome.ALREADY_RESOLVED),
            (409, Outcome.ALREADY_RESOLVED),
            (400, Outcome.RETRY),
            (401, Outcome.RETRY),
            (500, Outcome.RETRY),
            (503, Outcome.RETRY),
            (204, Outcome.RETRY),
        ],
    )
    def test_status_codes(self, status_code, expected):
        assert classify_session_response(status_code) == expected

    @pytest.mark.parametrize("kind", list(TransportErrorKind))
    def test_transport_errors_retry(self, kind):
        assert classify_session_response(None, kind) == Outcome.RETRY

    def test_no_status_retries(self):
        assert classify_session_response(None) == Outcome.RETRY
