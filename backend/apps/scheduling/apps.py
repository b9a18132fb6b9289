"""Scheduling app configuration."""

from django.apps import AppConfig


class SchedulingConfig(AppConfig):
    """Configuration for scheduling app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.scheduling"
