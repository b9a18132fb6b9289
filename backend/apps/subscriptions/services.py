"""
Subscription service layer.

Lookups return SubscriberRecord values rather than model instances so callers
outside this app never touch the ORM.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction

from apps.core.logging import get_logger
from apps.identity.exceptions import IdentityError
from apps.subscriptions.exceptions import SubscriberResolutionError
from apps.subscriptions.models import Subscriber, Subscription
from apps.subscriptions.schemas import OrderEvent, SubscriberRecord, SubscriptionRecord

logger = get_logger(__name__)


@dataclass
class OrderSubscriptions:
    """Subscriber for an order and the targets it is now subscribed to."""

    subscriber: Subscriber
    targets: list[tuple[str, str]] = field(default_factory=list)


def _to_record(subscriber: Subscriber) -> SubscriberRecord:
    return SubscriberRecord(
        subscriber_id=subscriber.id,
        user_id=subscriber.user_id,
        email=subscriber.email,
        created_at=subscriber.created_at,
    )


def _subscribers_for(category: str, target_id: str) -> list[SubscriberRecord]:
    subscribers = Subscriber.objects.filter(
        subscriptions__category=category,
        subscriptions__target_uuid=target_id,
    ).distinct()
    return [_to_record(subscriber) for subscriber in subscribers]


def get_session_subscribers(session_id: str) -> list[SubscriberRecord]:
    """Subscribers following a single session."""
    return _subscribers_for(Subscription.Category.SESSION, session_id)


def get_event_subscribers(event_id: str) -> list[SubscriberRecord]:
    """Subscribers following an event (and so every session of it)."""
    return _subscribers_for(Subscription.Category.EVENT, event_id)


def get_or_create_subscriber(
    user_id: str, resolve_email: Callable[[str], str]
) -> Subscriber:
    """
    Get the subscriber for a user, creating it on first subscribe.

    Args:
        user_id: Identity provider user id.
        resolve_email: Called only when the subscriber is new.

    Raises:
        SubscriberResolutionError: If the email lookup fails.
    """
    subscriber = Subscriber.objects.filter(user_id=user_id).first()
    if subscriber is not None:
        return subscriber

    try:
        email = resolve_email(user_id)
    except IdentityError as e:
        logger.warning("subscriber_email_lookup_failed", user_id=user_id, error=str(e))
        raise SubscriberResolutionError(f"Could not resolve email for user {user_id}") from e

    try:
        with transaction.atomic():
            subscriber = Subscriber.objects.create(user_id=user_id, email=email)
    except IntegrityError:
        # Concurrent first subscribe for the same user
        return Subscriber.objects.get(user_id=user_id)

    logger.info("subscriber_created", subscriber_id=subscriber.id, user_id=user_id)
    return subscriber


def add_subscription(subscriber: Subscriber, category: str, target_id: str) -> bool:
    """Subscribe. Returns False if the subscription already existed."""
    _, created = Subscription.objects.get_or_create(
        subscriber=subscriber,
        category=category,
        target_uuid=target_id,
    )
    if created:
        logger.info(
            "subscription_added",
            subscriber_id=subscriber.id,
            category=category,
            target_id=target_id,
        )
    return created


def remove_subscription(subscriber: Subscriber, category: str, target_id: str) -> bool:
    """Unsubscribe. Returns False if there was nothing to remove."""
    deleted, _ = Subscription.objects.filter(
        subscriber=subscriber,
        category=category,
        target_uuid=target_id,
    ).delete()
    if deleted:
        logger.info(
            "subscription_removed",
            subscriber_id=subscriber.id,
            category=category,
            target_id=target_id,
        )
    return bool(deleted)


def is_subscribed(subscriber: Subscriber, category: str, target_id: str) -> bool:
    return Subscription.objects.filter(
        subscriber=subscriber,
        category=category,
        target_uuid=target_id,
    ).exists()


def list_subscriptions(
    subscriber: Subscriber, category: str | None = None
) -> list[SubscriptionRecord]:
    """List a subscriber's subscriptions, newest first."""
    queryset = Subscription.objects.filter(subscriber=subscriber)
    if category:
        queryset = queryset.filter(category=category)
    return [
        SubscriptionRecord(
            category=Subscription.Category(subscription.category),
            target_id=subscription.target_uuid,
            subscribed_at=subscription.subscribed_at,
        )
        for subscription in queryset
    ]


def subscribe_for_order(
    order: OrderEvent, resolve_email: Callable[[str], str]
) -> OrderSubscriptions:
    """
    Subscribe the buyer of a completed order to its event, session and organization.

    The subscriber is created for every order. Subscriptions are only added
    once the order is completed; replaying an order adds nothing new.

    Raises:
        SubscriberResolutionError: If the buyer is new and their email lookup fails.
    """
    subscriber = get_or_create_subscriber(order.user_id, resolve_email)
    result = OrderSubscriptions(subscriber=subscriber)

    if not order.is_completed:
        logger.info("order_not_completed", order_id=order.order_id, status=order.status)
        return result

    targets = (
        (Subscription.Category.EVENT, order.event_id),
        (Subscription.Category.SESSION, order.session_id),
        (Subscription.Category.ORGANIZATION, order.organization_id),
    )
    for category, target_id in targets:
        if not target_id:
            continue
        add_subscription(subscriber, category, target_id)
        result.targets.append((category, target_id))

    logger.info(
        "order_subscriptions_added",
        order_id=order.order_id,
        subscriber_id=subscriber.id,
        targets=len(result.targets),
    )
    return result
