"""
Subscription API endpoints.

The caller is identified by the ``sub`` claim of their bearer token; those
endpoints only read or change the caller's own subscriptions. Orders are
ingested by an internal endpoint guarded by the service API key.
"""

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.core.security import BearerAuth, InternalApiKeyAuth
from apps.identity.keycloak_client import get_identity_client
from apps.subscriptions.exceptions import SubscriberResolutionError
from apps.subscriptions.models import Subscriber, Subscription
from apps.subscriptions.schemas import (
    OrderEvent,
    OrderSubscriptionResponse,
    SubscribeRequest,
    SubscriptionListResponse,
    SubscriptionStatusResponse,
)
from apps.subscriptions.services import (
    add_subscription,
    get_or_create_subscriber,
    is_subscribed,
    list_subscriptions,
    remove_subscription,
    subscribe_for_order,
)

router = Router(tags=["subscriptions"])
internal_router = Router(tags=["subscriptions"])
bearer_auth = BearerAuth()
internal_auth = InternalApiKeyAuth()


def _current_subscriber(request: HttpRequest) -> Subscriber:
    user_id: str = request.auth  # type: ignore[attr-defined]
    try:
        return get_or_create_subscriber(user_id, get_identity_client().get_user_email)
    except SubscriberResolutionError as e:
        raise HttpError(502, str(e)) from None


@router.post(
    "",
    response={201: SubscriptionStatusResponse},
    auth=bearer_auth,
    operation_id="subscribe",
    summary="Subscribe to a target",
)
def subscribe(request: HttpRequest, payload: SubscribeRequest):
    """Subscribe the caller. Subscribing twice is not an error."""
    subscriber = _current_subscriber(request)
    add_subscription(subscriber, payload.category, payload.target_id)
    return 201, SubscriptionStatusResponse(
        category=payload.category,
        target_id=payload.target_id,
        subscribed=True,
    )


@router.delete(
    "/{category}/{target_id}",
    response=SubscriptionStatusResponse,
    auth=bearer_auth,
    operation_id="unsubscribe",
    summary="Unsubscribe from a target",
)
def unsubscribe(
    request: HttpRequest, category: Subscription.Category, target_id: str
) -> SubscriptionStatusResponse:
    """Remove the caller's subscription, if any."""
    subscriber = _current_subscriber(request)
    remove_subscription(subscriber, category, target_id)
    return SubscriptionStatusResponse(category=category, target_id=target_id, subscribed=False)


@router.get(
    "",
    response=SubscriptionListResponse,
    auth=bearer_auth,
    operation_id="listSubscriptions",
    summary="List subscriptions",
)
def list_my_subscriptions(
    request: HttpRequest, category: Subscription.Category | None = None
) -> SubscriptionListResponse:
    subscriber = _current_subscriber(request)
    return SubscriptionListResponse(subscriptions=list_subscriptions(subscriber, category))


@router.get(
    "/{category}/{target_id}",
    response=SubscriptionStatusResponse,
    auth=bearer_auth,
    operation_id="checkSubscription",
    summary="Check a subscription",
)
def check_subscription(
    request: HttpRequest, category: Subscription.Category, target_id: str
) -> SubscriptionStatusResponse:
    subscriber = _current_subscriber(request)
    return SubscriptionStatusResponse(
        category=category,
        target_id=target_id,
        subscribed=is_subscribed(subscriber, category, target_id),
    )


@internal_router.post(
    "",
    response=OrderSubscriptionResponse,
    auth=internal_auth,
    operation_id="subscribeForOrder",
    summary="Subscribe an order's buyer",
    description="Subscribe the buyer of a completed order to its event, session and organization.",
)
def subscribe_for_order_endpoint(request: HttpRequest, payload: OrderEvent) -> OrderSubscriptionResponse:
    try:
        result = subscribe_for_order(payload, get_identity_client().get_user_email)
    except SubscriberResolutionError as e:
        raise HttpError(502, str(e)) from None

    return OrderSubscriptionResponse(
        order_id=payload.order_id,
        subscriber_id=result.subscriber.id,
        subscriptions=[
            SubscriptionStatusResponse(category=category, target_id=target_id, subscribed=True)
            for category, target_id in result.targets
        ],
    )
