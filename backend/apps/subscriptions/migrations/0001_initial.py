"""
Create Subscriber and Subscription tables.
"""

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="Subscriber",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "user_id",
                    models.CharField(
                        blank=True,
                        help_text="Identity provider user id",
                        max_length=255,
                        null=True,
                        unique=True,
                    ),
                ),
                (
                    "email",
                    models.EmailField(help_text="Address reminders are sent to", max_length=255),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Subscription",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("organization", "Organization"),
                            ("event", "Event"),
                            ("session", "Session"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "target_uuid",
                    models.CharField(help_text="Id of the organization, event or session", max_length=64),
                ),
                ("subscribed_at", models.DateTimeField(auto_now_add=True)),
                (
                    "subscriber",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="subscriptions",
                        to="subscriptions.subscriber",
                    ),
                ),
            ],
            options={
                "ordering": ["-subscribed_at"],
                "indexes": [
                    models.Index(
                        fields=["category", "target_uuid"],
                        name="subscription_target_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("subscriber", "category", "target_uuid"),
                        name="unique_subscription_per_target",
                    )
                ],
            },
        ),
    ]
