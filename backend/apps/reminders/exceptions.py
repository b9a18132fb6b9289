"""
Exceptions for reminders app.
"""


class ReminderError(Exception):
    """Base exception for reminder errors."""

    pass


class ResourceNotFoundError(ReminderError):
    """The query service has no such session or event (HTTP 404)."""

    pass


class QueryServiceError(ReminderError):
    """The query service could not be reached or returned an unexpected response."""

    pass


class ReminderDeliveryError(ReminderError):
    """No reminder email could be delivered to any recipient."""

    def __init__(self, message: str, attempted: int = 0):
        super().__init__(message)
        self.attempted = attempted
