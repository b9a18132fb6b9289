"""
Tests for subscription services.
"""

from unittest.mock import MagicMock

import pytest

from apps.identity.exceptions import UserLookupError
from apps.subscriptions.exceptions import SubscriberResolutionError
from apps.subscriptions.models import Subscriber, Subscription
from apps.subscriptions.schemas import OrderEvent
from apps.subscriptions.services import (
    add_subscription,
    get_event_subscribers,
    get_or_create_subscriber,
    get_session_subscribers,
    is_subscribed,
    list_subscriptions,
    remove_subscription,
    subscribe_for_order,
)
from tests.subscriptions.factories import SubscriberFactory, SubscriptionFactory


@pytest.mark.django_db
class TestSubscriberLookups:
    """Tests for the per-target subscriber lookups."""

    def test_session_subscribers(self):
        first = SubscriptionFactory.create(category=Subscription.Category.SESSION, target_uuid="s-1")
        second = SubscriptionFactory.create(category=Subscription.Category.SESSION, target_uuid="s-1")
        SubscriptionFactory.create(category=Subscription.Category.SESSION, target_uuid="s-2")
        SubscriptionFactory.create(category=Subscription.Category.EVENT, target_uuid="s-1")

        records = get_session_subscribers("s-1")

        assert {r.subscriber_id for r in records} == {first.subscriber_id, second.subscriber_id}
        assert all(r.email.endswith("@example.com") for r in records)

    def test_event_subscribers(self):
        subscription = SubscriptionFactory.create(category=Subscription.Category.EVENT, target_uuid="e-1")

        records = get_event_subscribers("e-1")

        assert [r.subscriber_id for r in records] == [subscription.subscriber_id]
        assert records[0].user_id == subscription.subscriber.user_id

    def test_no_subscribers(self):
        assert get_session_subscribers("nobody") == []


@pytest.mark.django_db
class TestGetOrCreateSubscriber:
    """Tests for get_or_create_subscriber."""

    def test_creates_on_first_use(self):
        resolve = MagicMock(return_value="new@example.com")

        subscriber = get_or_create_subscriber("u-1", resolve)

        assert subscriber.user_id == "u-1"
        assert subscriber.email == "new@example.com"
        resolve.assert_called_once_with("u-1")

    def test_returns_existing_without_lookup(self):
        existing = SubscriberFactory.create(user_id="u-2")
        resolve = MagicMock()

        assert get_or_create_subscriber("u-2", resolve) == existing
        resolve.assert_not_called()

    def test_lookup_failure(self):
        resolve = MagicMock(side_effect=UserLookupError("no such user"))

        with pytest.raises(SubscriberResolutionError):
            get_or_create_subscriber("u-3", resolve)
        assert not Subscriber.objects.filter(user_id="u-3").exists()


@pytest.mark.django_db
class TestSubscriptionChanges:
    """Tests for add, remove, check and list."""

    def test_add_is_idempotent(self):
        subscriber = SubscriberFactory.create()

        assert add_subscription(subscriber, Subscription.Category.SESSION, "s-1") is True
        assert add_subscription(subscriber, Subscription.Category.SESSION, "s-1") is False
        assert Subscription.objects.filter(subscriber=subscriber).count() == 1

    def test_same_target_in_different_categories(self):
        subscriber = SubscriberFactory.create()

        add_subscription(subscriber, Subscription.Category.SESSION, "x-1")
        add_subscription(subscriber, Subscription.Category.EVENT, "x-1")

        assert Subscription.objects.filter(subscriber=subscriber).count() == 2

    def test_remove(self):
        subscriber = SubscriberFactory.create()
        add_subscription(subscriber, Subscription.Category.EVENT, "e-1")

        assert remove_subscription(subscriber, Subscription.Category.EVENT, "e-1") is True
        assert remove_subscription(subscriber, Subscription.Category.EVENT, "e-1") is False
        assert not is_subscribed(subscriber, Subscription.Category.EVENT, "e-1")

    def test_is_subscribed_scoped_to_subscriber(self):
        subscription = SubscriptionFactory.create(category=Subscription.Category.SESSION, target_uuid="s-1")
        other = SubscriberFactory.create()

        assert is_subscribed(subscription.subscriber, Subscription.Category.SESSION, "s-1")
        assert not is_subscribed(other, Subscription.Category.SESSION, "s-1")

    def test_list_with_category_filter(self):
        subscriber = SubscriberFactory.create()
        add_subscription(subscriber, Subscription.Category.SESSION, "s-1")
        add_subscription(subscriber, Subscription.Category.EVENT, "e-1")

        assert len(list_subscriptions(subscriber)) == 2
        events = list_subscriptions(subscriber, Subscription.Category.EVENT)
        assert [(r.category, r.target_id) for r in events] == [(Subscription.Category.EVENT, "e-1")]


def order_event(**overrides) -> OrderEvent:
    data = {
        "OrderID": "ord-1",
        "UserID": "buyer-1",
        "EventID": "e-1",
        "SessionID": "s-1",
        "OrganizationID": "o-1",
        "Status": "completed",
    }
    data.update(overrides)
    return OrderEvent.model_validate(data)


@pytest.mark.django_db
class TestSubscribeForOrder:
    """Tests for subscribe_for_order."""

    def test_completed_order_subscribes_buyer(self):
        """Should subscribe the buyer to the event, session and organization."""
        resolve = MagicMock(return_value="buyer@example.com")

        result = subscribe_for_order(order_event(), resolve)

        assert result.subscriber.email == "buyer@example.com"
        assert result.targets == [
            (Subscription.Category.EVENT, "e-1"),
            (Subscription.Category.SESSION, "s-1"),
            (Subscription.Category.ORGANIZATION, "o-1"),
        ]
        assert [r.subscriber_id for r in get_session_subscribers("s-1")] == [result.subscriber.id]
        assert [r.subscriber_id for r in get_event_subscribers("e-1")] == [result.subscriber.id]

    def test_pending_order_creates_subscriber_only(self):
        result = subscribe_for_order(order_event(Status="pending"), MagicMock(return_value="b@example.com"))

        assert result.targets == []
        assert Subscriber.objects.filter(user_id="buyer-1").exists()
        assert not Subscription.objects.exists()

    def test_missing_organization_is_skipped(self):
        result = subscribe_for_order(order_event(OrganizationID=""), MagicMock(return_value="b@example.com"))

        assert [category for category, _ in result.targets] == [
            Subscription.Category.EVENT,
            Subscription.Category.SESSION,
        ]

    def test_replayed_order_adds_nothing_new(self):
        """Should be safe to process the same order twice."""
        resolve = MagicMock(return_value="b@example.com")

        subscribe_for_order(order_event(), resolve)
        subscribe_for_order(order_event(), resolve)

        assert Subscription.objects.count() == 3
        resolve.assert_called_once_with("buyer-1")

    def test_accepts_snake_case_keys(self):
        order = OrderEvent.model_validate(
            {"order_id": "ord-2", "user_id": "buyer-2", "session_id": "s-2", "status": "COMPLETED"}
        )

        result = subscribe_for_order(order, MagicMock(return_value="c@example.com"))

        assert result.targets == [(Subscription.Category.SESSION, "s-2")]

    def test_email_lookup_failure(self):
        with pytest.raises(SubscriberResolutionError):
            subscribe_for_order(order_event(), MagicMock(side_effect=UserLookupError("down")))
        assert not Subscription.objects.exists()
