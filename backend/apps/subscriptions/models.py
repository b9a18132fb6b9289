"""
Subscription models - who wants to hear about which organization, event or session.
"""

from django.db import models


class Subscriber(models.Model):
    """
    A person who receives notifications.

    ``user_id`` is the identity provider's user id. Subscribers created before
    sign-in have an email only.
    """

    user_id = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text="Identity provider user id",
    )
    email = models.EmailField(max_length=255, help_text="Address reminders are sent to")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.email


class Subscription(models.Model):
    """A subscriber's interest in one organization, event or session."""

    class Category(models.TextChoices):
        ORGANIZATION = "organization", "Organization"
        EVENT = "event", "Event"
        SESSION = "session", "Session"

    subscriber = models.ForeignKey(
        Subscriber,
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    target_uuid = models.CharField(
        max_length=64,
        help_text="Id of the organization, event or session",
    )
    subscribed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-subscribed_at"]
        indexes = [
            models.Index(fields=["category", "target_uuid"], name="subscription_target_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["subscriber", "category", "target_uuid"],
                name="unique_subscription_per_target",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.subscriber_id} -> {self.category}:{self.target_uuid}"
