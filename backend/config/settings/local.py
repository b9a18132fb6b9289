"""
Local development settings.

Extends base settings with development-friendly defaults.
"""

from .base import *  # noqa: F403
from .base import settings

DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Pretty console logs in development
LOG_JSON = False

# Print reminder emails instead of sending them
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# LocalStack unless told otherwise
AWS_ENDPOINT_URL = settings.AWS_ENDPOINT_URL or "http://localhost:4566"
