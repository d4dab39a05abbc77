"""Moving work between the gathering and distribution stages.

Transfers are not transactional. Item writes go first, one document each;
the order readiness recomputation runs after all of them were attempted and
re-reads the items from the store before flipping the order.
"""

from collections.abc import Iterable

from protean.utils.globals import current_domain

from shipment.item.delivery import RecallItemToGathering
from shipment.item.gathering import TransferItemToWarehouse
from shipment.item.item import GatheringStatus, ShipmentItem
from shipment.order.distribution import MarkOrderReady, ReturnOrderToGathering
from shipment.shared.keys import ItemKey
from shipment.utils.logging import get_logger
from shipment.workflow.combined import load_each
from shipment.workflow.exceptions import CannotReverseDeliveredPartial
from shipment.workflow.predicates import is_order_incomplete
from shipment.workflow.results import BulkResult, TransferResult, process_each

logger = get_logger(__name__)


def refresh_order_readiness(order_id: str) -> bool:
    """Flag the order ready if every one of its items is at the warehouse.

    Returns True when all items are staged. Orders already flagged are left
    untouched by the command handler.
    """
    items = current_domain.repository_for(ShipmentItem).for_order(order_id)
    if not items or any(item.gathering_status != GatheringStatus.AT_WAREHOUSE.value for item in items):
        return False
    current_domain.process(MarkOrderReady(order_id=order_id), asynchronous=False)
    return True


def refresh_readiness_after(result: TransferResult) -> TransferResult:
    """Recompute readiness for every order that had a successful item write."""
    order_ids = list(dict.fromkeys(key.order_id for key in result.succeeded))
    for order_id in order_ids:
        try:
            if refresh_order_readiness(order_id):
                result.ready_orders.append(order_id)
        except Exception as exc:
            logger.warning("Order readiness recomputation failed", order_id=order_id, error=str(exc))
            result.stale_orders[order_id] = str(exc)
    return result


def transfer_items_to_distribution(item_keys: Iterable[ItemKey]) -> TransferResult:
    """Operator fast-track of items to the warehouse, then readiness recomputation."""
    keys = list(dict.fromkeys(item_keys))
    result = process_each(
        ((key, TransferItemToWarehouse(order_id=key.order_id, item_id=key.item_id)) for key in keys),
        TransferResult(),
    )
    refresh_readiness_after(result)
    logger.info(
        "Items transferred to distribution",
        succeeded=len(result.succeeded),
        failed=len(result.failed),
        ready_orders=result.ready_orders,
    )
    return result


def transfer_orders_to_gathering(order_ids: Iterable[str]) -> BulkResult:
    """Send orders back to gathering.

    Unknown order ids are reported failed. The whole batch is rejected
    before any write when one of the orders was partially delivered and
    still waits for items. Otherwise each order header is reset and then
    each of its items recalled; items are left alone when the header write
    fails. An order is reported failed if any of its writes failed.
    """
    result = BulkResult()
    combined_orders = load_each(list(dict.fromkeys(order_ids)), result)

    blocked = [
        combined.order_id
        for combined in combined_orders
        if is_order_incomplete(combined) and combined.order.delivered_at is not None
    ]
    if blocked:
        logger.warning("Reversal blocked for partially delivered orders", order_ids=blocked)
        raise CannotReverseDeliveredPartial(blocked)

    for combined in combined_orders:
        order_result = process_each([(combined.order_id, ReturnOrderToGathering(order_id=combined.order_id))])
        if order_result.ok:
            process_each(
                (
                    (item.key, RecallItemToGathering(order_id=item.order_id, item_id=item.item_id))
                    for item in combined.items
                ),
                order_result,
            )
        if order_result.failed:
            result.record_failure(combined.order_id, "; ".join(order_result.errors.values()))
        else:
            result.record_success(combined.order_id)

    logger.info("Orders returned to gathering", succeeded=result.succeeded, failed=result.failed)
    return result
