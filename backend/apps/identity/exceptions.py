"""
Exceptions for identity app.
"""


class IdentityError(Exception):
    """Base exception for identity provider errors."""

    pass


class TokenFetchError(IdentityError):
    """
    Service token could not be obtained.

    Fatal to the current batch: every remaining message would fail the same way.
    """

    pass


class UserLookupError(IdentityError):
    """User details could not be loaded from the identity provider."""

    pass
