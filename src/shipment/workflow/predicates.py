"""Order-state predicates and the single badge classification built on them.

The three predicates overlap; ``classify_order`` is the one place that
decides which of them wins.
"""

from enum import Enum

from shipment.item.item import GatheringStatus
from shipment.workflow.combined import CombinedOrder


class OrderBadge(Enum):
    INCOMPLETE = "incomplete"
    NEEDS_COMPLETION = "needs_completion"
    HAS_PARTIAL_HISTORY = "has_partial_history"
    NORMAL = "normal"


def is_order_incomplete(combined: CombinedOrder) -> bool:
    """Some item of the order has not reached the warehouse yet."""
    if combined.order.all_items_gathered:
        return False
    return any(item.gathering_status != GatheringStatus.AT_WAREHOUSE.value for item in combined.items)


def is_partial_delivery_needing_completion(combined: CombinedOrder) -> bool:
    """Fully staged now, delivered once before, and waiting for a new distributor."""
    order = combined.order
    if not order.all_items_gathered or order.delivered_at is None or order.distributed_by:
        return False
    return any(not item.is_delivered for item in combined.staged_items)


def has_partial_delivery_history(combined: CombinedOrder) -> bool:
    """Items kept arriving after a delivery was recorded."""
    delivered_at = combined.order.delivered_at
    if delivered_at is None:
        return False
    return any(item.arrived_at is not None and item.arrived_at > delivered_at for item in combined.items)


def classify_order(combined: CombinedOrder) -> OrderBadge:
    if is_order_incomplete(combined):
        return OrderBadge.INCOMPLETE
    if is_partial_delivery_needing_completion(combined):
        return OrderBadge.NEEDS_COMPLETION
    if has_partial_delivery_history(combined):
        return OrderBadge.HAS_PARTIAL_HISTORY
    return OrderBadge.NORMAL


def matches_search(combined: CombinedOrder, query: str | None) -> bool:
    """Case-insensitive match on buyer, distributor, product or seller name, or order id."""
    needle = (query or "").strip().lower()
    if not needle:
        return True

    order = combined.order
    haystack = [order.order_id, order.buyer_name, order.distributed_by_name]
    for item in combined.items:
        haystack.extend([item.product_name, item.seller_name])
    return any(needle in str(value).lower() for value in haystack if value)


def item_matches_search(item, query: str | None) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    haystack = [item.order_id, item.buyer_name, item.product_name, item.seller_name, item.gathered_by_name]
    return any(needle in str(value).lower() for value in haystack if value)
