"""
Exceptions for subscriptions app.
"""


class SubscriptionError(Exception):
    """Base exception for subscription errors."""

    pass


class SubscriberResolutionError(SubscriptionError):
    """No email could be found for a new subscriber."""

    pass
