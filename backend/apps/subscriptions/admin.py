"""Admin configuration for subscriptions app."""

from django.contrib import admin

from apps.subscriptions.models import Subscriber, Subscription


class SubscriptionInline(admin.TabularInline):
    model = Subscription
    extra = 0
    readonly_fields = ["subscribed_at"]


@admin.register(Subscriber)
class SubscriberAdmin(admin.ModelAdmin):
    """Admin for Subscriber model."""

    list_display = ["id", "email", "user_id", "created_at"]
    search_fields = ["email", "user_id"]
    readonly_fields = ["created_at"]
    inlines = [SubscriptionInline]


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    """Admin for Subscription model."""

    list_display = ["subscriber", "category", "target_uuid", "subscribed_at"]
    list_filter = ["category"]
    search_fields = ["target_uuid", "subscriber__email"]
    ordering = ["-subscribed_at"]
