"""
Exceptions for queues app.
"""


class QueueError(Exception):
    """Base exception for queue adapter errors."""

    def __init__(self, message: str, queue_url: str = ""):
        super().__init__(message)
        self.queue_url = queue_url


class QueueReceiveError(QueueError):
    """Receive call failed. The loop backs off and tries again."""

    pass


class QueueDeleteError(QueueError):
    """
    Delete call failed as a whole.

    The affected messages become visible again and are redelivered.
    """

    def __init__(self, message: str, queue_url: str = "", count: int = 0):
        super().__init__(message, queue_url)
        self.count = count


class MalformedMessageError(Exception):
    """Message body is not valid JSON or does not match any known payload."""

    pass
