"""
Exceptions for scheduling app.
"""


class SchedulingError(Exception):
    """Schedule could not be created or updated in the trigger service."""

    def __init__(self, message: str, schedule_name: str = "", code: str = ""):
        super().__init__(message)
        self.schedule_name = schedule_name
        self.code = code
