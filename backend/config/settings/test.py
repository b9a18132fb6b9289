"""
Test settings.

In-memory SQLite and the locmem email backend so tests run without
PostgreSQL, SMTP or AWS.
"""

from .base import *  # noqa: F403

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "Ticketly <noreply@ticketly.com>"
FRONTEND_URL = "https://tickets.example.com"

LOG_JSON = False
LOG_LEVEL = "WARNING"

AWS_ENDPOINT_URL = None
SCHEDULER_ROLE_ARN = "arn:aws:iam::000000000000:role/scheduler"
SCHEDULER_GROUP_NAME = "default"
SESSION_SCHEDULING_QUEUE_ARN = "arn:aws:sqs:ap-south-1:000000000000:session-scheduling"
SESSION_REMINDERS_QUEUE_ARN = "arn:aws:sqs:ap-south-1:000000000000:session-reminders"
QUEUE_URLS = {
    "session-scheduling": "https://sqs.test/000000000000/session-scheduling",
    "session-reminders": "https://sqs.test/000000000000/session-reminders",
    "trending-job": "https://sqs.test/000000000000/trending-job",
}

EVENT_SERVICE_URL = "http://event-service.test/api/event-seating"
EVENT_QUERY_SERVICE_URL = "http://event-query.test/api/event-query"
KEYCLOAK_URL = "http://keycloak.test"
KEYCLOAK_REALM = "event-ticketing"
KEYCLOAK_CLIENT_ID = "scheduler-service-client"
KEYCLOAK_CLIENT_SECRET = "test-secret"

INTERNAL_API_KEY = "test-internal-key"
