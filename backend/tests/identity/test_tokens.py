"""
Tests for token helpers.
"""

from unittest.mock import MagicMock

import jwt
import pytest

from apps.identity.exceptions import TokenFetchError
from apps.identity.tokens import BatchContext, subject_from_jwt


class TestBatchContext:
    """Tests for BatchContext."""

    def test_fetches_token_lazily_once(self):
        """Should call the token source on first use only."""
        source = MagicMock(return_value="tok-1")
        batch = BatchContext(source)

        assert not batch.has_token
        source.assert_not_called()

        assert batch.bearer_token() == "tok-1"
        assert batch.bearer_token() == "tok-1"
        assert batch.has_token
        source.assert_called_once()

    def test_new_batch_fetches_new_token(self):
        """Tokens are not shared between batches."""
        source = MagicMock(side_effect=["tok-1", "tok-2"])

        assert BatchContext(source).bearer_token() == "tok-1"
        assert BatchContext(source).bearer_token() == "tok-2"

    def test_propagates_token_fetch_error(self):
        source = MagicMock(side_effect=TokenFetchError("down"))
        batch = BatchContext(source)

        with pytest.raises(TokenFetchError):
            batch.bearer_token()
        assert not batch.has_token

    def test_failed_fetch_is_not_retried_within_batch(self):
        """Should re-raise the first fetch failure without asking the source again."""
        source = MagicMock(side_effect=TokenFetchError("down"))
        batch = BatchContext(source)

        for _ in range(5):
            with pytest.raises(TokenFetchError, match="down"):
                batch.bearer_token()

        source.assert_called_once()
        assert not batch.has_token

    def test_next_batch_retries_after_failure(self):
        """Should fetch again in a fresh batch after a failed one."""
        source = MagicMock(side_effect=[TokenFetchError("down"), "tok-2"])

        with pytest.raises(TokenFetchError):
            BatchContext(source).bearer_token()
        assert BatchContext(source).bearer_token() == "tok-2"

    def test_raises_without_token_source(self):
        with pytest.raises(RuntimeError):
            BatchContext().bearer_token()


class TestSubjectFromJwt:
    """Tests for subject_from_jwt."""

    def test_reads_sub_without_verifying(self):
        token = jwt.encode({"sub": "user-9"}, "test-signing-key-0123456789abcdef0123", algorithm="HS256")

        assert subject_from_jwt(token) == "user-9"

    def test_returns_none_for_invalid_token(self):
        assert subject_from_jwt("a.b.c") is None

    def test_returns_none_for_empty_sub(self):
        token = jwt.encode({"sub": ""}, "test-signing-key-0123456789abcdef0123", algorithm="HS256")

        assert subject_from_jwt(token) is None
