"""Identity app configuration."""

from django.apps import AppConfig


class IdentityConfig(AppConfig):
    """Configuration for identity app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.identity"
