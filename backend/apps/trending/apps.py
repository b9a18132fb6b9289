"""Trending app configuration."""

from django.apps import AppConfig


class TrendingConfig(AppConfig):
    """Configuration for trending app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.trending"
