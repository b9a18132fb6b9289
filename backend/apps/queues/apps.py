"""Queues app configuration."""

from django.apps import AppConfig


class QueuesConfig(AppConfig):
    """Configuration for queues app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.queues"
