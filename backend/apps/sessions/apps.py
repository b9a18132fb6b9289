"""Sessions app configuration."""

from django.apps import AppConfig


class SessionsConfig(AppConfig):
    """Configuration for sessions app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.sessions"
    label = "event_sessions"
