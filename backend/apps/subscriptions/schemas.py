"""
Pydantic schemas for subscriptions.
"""

from datetime import datetime

from ninja import Schema
from pydantic import AliasChoices, Field

from apps.subscriptions.models import Subscription


class SubscriberRecord(Schema):
    """A subscriber as seen by reminder fan-out."""

    subscriber_id: int
    user_id: str | None = None
    email: str
    created_at: datetime | None = None


class SubscriptionRecord(Schema):
    """A single subscription."""

    category: Subscription.Category
    target_id: str
    subscribed_at: datetime


class SubscribeRequest(Schema):
    """Request to subscribe the caller to a target."""

    category: Subscription.Category = Field(description="organization, event or session")
    target_id: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("targetId", "target_id"),
        description="Id of the organization, event or session",
    )


class SubscriptionStatusResponse(Schema):
    """Whether the caller is subscribed to a target."""

    category: Subscription.Category
    target_id: str
    subscribed: bool


class SubscriptionListResponse(Schema):
    """The caller's subscriptions."""

    subscriptions: list[SubscriptionRecord]


ORDER_STATUS_COMPLETED = "completed"


class OrderEvent(Schema):
    """
    An order placed by a user.

    Accepts the upstream PascalCase keys (``OrderID``) as well as camelCase
    and snake_case.
    """

    order_id: str = Field(min_length=1, validation_alias=AliasChoices("OrderID", "orderId", "order_id"))
    user_id: str = Field(min_length=1, validation_alias=AliasChoices("UserID", "userId", "user_id"))
    event_id: str = Field(default="", validation_alias=AliasChoices("EventID", "eventId", "event_id"))
    session_id: str = Field(default="", validation_alias=AliasChoices("SessionID", "sessionId", "session_id"))
    organization_id: str = Field(
        default="",
        validation_alias=AliasChoices("OrganizationID", "organizationId", "organization_id"),
    )
    status: str = Field(default="", validation_alias=AliasChoices("Status", "status"))

    @property
    def is_completed(self) -> bool:
        return self.status.lower() == ORDER_STATUS_COMPLETED


class OrderSubscriptionResponse(Schema):
    """Subscriptions held for the buyer after an order was processed."""

    order_id: str
    subscriber_id: int
    subscriptions: list[SubscriptionStatusResponse]
