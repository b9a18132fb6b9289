"""
Subscriber aggregation.
"""

from collections.abc import Iterable

from apps.subscriptions.schemas import SubscriberRecord


def merge_subscribers(*sources: Iterable[SubscriberRecord]) -> list[SubscriberRecord]:
    """
    Merge subscriber lists, keeping one record per subscriber_id.

    Later sources win on conflict; all sources describe the same subscriber
    row, so the choice only matters if a record changed between lookups.
    """
    merged: dict[int, SubscriberRecord] = {}
    for source in sources:
        for subscriber in source:
            merged[subscriber.subscriber_id] = subscriber
    return list(merged.values())
