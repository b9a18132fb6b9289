"""
Token helpers.

BatchContext holds at most one service token per batch. Tokens are never
cached across batches or shared between consumer loops.
"""

from collections.abc import Callable

import jwt

from apps.core.logging import get_logger
from apps.identity.exceptions import TokenFetchError

logger = get_logger(__name__)


class BatchContext:
    """
    Per-batch state handed to message handlers.

    The token source is only called when a handler first asks for a token, so
    a batch that needs no downstream auth never touches the identity provider.
    """

    def __init__(self, token_source: Callable[[], str] | None = None):
        self._token_source = token_source
        self._token: str | None = None
        self._token_error: TokenFetchError | None = None

    def bearer_token(self) -> str:
        """
        Return the batch token, fetching it on first use.

        A failed fetch is remembered and re-raised on later calls, so the
        identity provider is asked at most once per batch.

        Raises:
            TokenFetchError: Propagated from the token source.
        """
        if self._token is not None:
            return self._token
        if self._token_error is not None:
            raise self._token_error
        if self._token_source is None:
            raise RuntimeError("BatchContext has no token source")

        try:
            self._token = self._token_source()
        except TokenFetchError as e:
            self._token_error = e
            raise
        logger.debug("batch_token_fetched")
        return self._token

    @property
    def has_token(self) -> bool:
        return self._token is not None


def subject_from_jwt(token: str) -> str | None:
    """
    Read the ``sub`` claim without verifying the signature.

    Signature checks happen at the gateway in front of this service.
    Returns None for anything that does not decode.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    subject = claims.get("sub")
    return subject if isinstance(subject, str) and subject else None
