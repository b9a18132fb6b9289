"""Subscriptions app configuration."""

from django.apps import AppConfig


class SubscriptionsConfig(AppConfig):
    """Configuration for subscriptions app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.subscriptions"
