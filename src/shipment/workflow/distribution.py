"""Distribution stage — eligibility lists and bulk order operations.

"Ready for distribution" spans several store conditions, so the lists are
the union of one query per rule, de-duplicated and sorted newest first:

1. fully gathered and ``ready``                     → unassigned
2. fully gathered and ``assigned``/``distributed``  → assigned
3. ``failed``                                       → assigned
4. not fully gathered: no status, ``pending`` or ``ready`` with at least
   one item staged → unassigned; ``assigned``/``distributed`` → assigned
5. not fully gathered and ``delivered``             → assigned (history)
6. fully gathered, ``delivered``, no distributor and an undelivered staged
   item                                             → unassigned
"""

from collections.abc import Iterable

from protean.utils.globals import current_domain

from shipment.courier.management import get_active_courier
from shipment.item.delivery import RecordItemHandedToBuyer
from shipment.order.distribution import (
    AssignDistributor,
    MarkOrderInTransit,
    RecordDistributionFailure,
    RecordOrderDelivered,
    UnassignDistributor,
)
from shipment.order.notes import UpdateOrderNote
from shipment.order.order import DistributionStatus, ShipmentOrder
from shipment.utils.logging import get_logger
from shipment.workflow.combined import CombinedOrder, combine, load_each
from shipment.workflow.exceptions import IncompleteOrderRequiresConfirmation
from shipment.workflow.predicates import (
    is_order_incomplete,
    is_partial_delivery_needing_completion,
    matches_search,
)
from shipment.workflow.results import BulkResult, process_each

logger = get_logger(__name__)

_AWAITING_DISTRIBUTOR = {None, DistributionStatus.PENDING, DistributionStatus.READY}
_OUT_WITH_DISTRIBUTOR = {DistributionStatus.ASSIGNED, DistributionStatus.DISTRIBUTED}


def _finalize(combined_orders: list[CombinedOrder], search: str | None) -> list[CombinedOrder]:
    unique = {combined.order_id: combined for combined in combined_orders}
    ordered = sorted(unique.values(), key=lambda combined: combined.order.timestamp, reverse=True)
    return [combined for combined in ordered if matches_search(combined, search)]


def list_unassigned_distribution_orders(search: str | None = None) -> list[CombinedOrder]:
    repo = current_domain.repository_for(ShipmentOrder)

    ready = combine(repo.gathered_with_status(DistributionStatus.READY))
    incomplete = [
        combined
        for combined in combine(repo.incomplete())
        if combined.order.status in _AWAITING_DISTRIBUTOR and combined.staged_items
    ]
    needs_completion = [
        combined
        for combined in combine(repo.gathered_with_status(DistributionStatus.DELIVERED))
        if is_partial_delivery_needing_completion(combined)
    ]
    return _finalize(ready + incomplete + needs_completion, search)


def list_assigned_distribution_orders(search: str | None = None) -> list[CombinedOrder]:
    repo = current_domain.repository_for(ShipmentOrder)

    active = combine(
        repo.gathered_with_status(DistributionStatus.ASSIGNED, DistributionStatus.DISTRIBUTED, DistributionStatus.FAILED)
    )
    incomplete = [
        combined
        for combined in combine(repo.incomplete())
        if combined.order.status in _OUT_WITH_DISTRIBUTOR | {DistributionStatus.FAILED, DistributionStatus.DELIVERED}
    ]
    return _finalize(active + incomplete, search)


def assign_orders_to_distributor(
    order_ids: Iterable[str], distributor_id: str, confirm_incomplete: bool = False
) -> BulkResult:
    """Assign orders to a courier for delivery.

    Incomplete orders need ``confirm_incomplete``; without it nothing is
    written and the shortfall of every incomplete order is reported.
    """
    courier = get_active_courier(distributor_id)
    result = BulkResult()
    combined_orders = load_each(list(dict.fromkeys(order_ids)), result)

    shortfalls = {
        combined.order_id: {
            "present": [item.item_id for item in combined.staged_items],
            "missing": [item.item_id for item in combined.missing_items],
        }
        for combined in combined_orders
        if is_order_incomplete(combined)
    }
    if shortfalls and not confirm_incomplete:
        raise IncompleteOrderRequiresConfirmation(shortfalls)

    assignable = []
    for combined in combined_orders:
        if not combined.staged_items:
            result.record_failure(combined.order_id, "No items of the order are at the warehouse")
        else:
            assignable.append(combined.order_id)

    process_each(
        (
            (
                order_id,
                AssignDistributor(
                    order_id=order_id,
                    distributor_id=courier.courier_id,
                    distributor_name=courier.display_name,
                ),
            )
            for order_id in assignable
        ),
        result,
    )
    logger.info(
        "Orders assigned to distributor",
        distributor_id=courier.courier_id,
        succeeded=len(result.succeeded),
        failed=len(result.failed),
        incomplete=sorted(shortfalls),
    )
    return result


def unassign_distributor(order_id: str) -> None:
    current_domain.process(UnassignDistributor(order_id=order_id), asynchronous=False)
    logger.info("Distributor unassigned", order_id=order_id)


def mark_orders_in_transit(order_ids: Iterable[str]) -> BulkResult:
    order_ids = list(dict.fromkeys(order_ids))
    result = process_each((order_id, MarkOrderInTransit(order_id=order_id)) for order_id in order_ids)
    logger.info("Orders in transit", succeeded=len(result.succeeded), failed=len(result.failed))
    return result


def record_order_failure(order_id: str, reason: str, notes: str | None = None) -> None:
    current_domain.process(
        RecordDistributionFailure(order_id=order_id, reason=reason, notes=notes),
        asynchronous=False,
    )
    logger.info("Order delivery failed", order_id=order_id, reason=reason)


def mark_orders_delivered(order_ids: Iterable[str]) -> BulkResult:
    """Record delivery of every staged item of each order.

    Each staged item is flagged as handed to the buyer. When the order still
    waits for items, or completes an earlier partial delivery, the
    distributor is released so the remainder can be assigned afresh. An
    order is reported failed if any of its writes failed.
    """
    result = BulkResult()
    combined_orders = load_each(list(dict.fromkeys(order_ids)), result)

    for combined in combined_orders:
        staged = combined.staged_items
        if not staged:
            result.record_failure(combined.order_id, "No items of the order are at the warehouse")
            continue

        was_previously_partial = combined.order.was_partially_delivered
        is_currently_incomplete = is_order_incomplete(combined)

        order_result = process_each(
            (item.key, RecordItemHandedToBuyer(order_id=item.order_id, item_id=item.item_id)) for item in staged
        )
        process_each(
            [
                (
                    combined.order_id,
                    RecordOrderDelivered(
                        order_id=combined.order_id,
                        retain_distributor=not (is_currently_incomplete or was_previously_partial),
                    ),
                )
            ],
            order_result,
        )

        if order_result.failed:
            result.record_failure(combined.order_id, "; ".join(order_result.errors.values()))
        else:
            result.record_success(combined.order_id)

    logger.info("Orders delivered", succeeded=result.succeeded, failed=result.failed)
    return result


def update_order_note(order_id: str, text: str | None) -> None:
    current_domain.process(UpdateOrderNote(order_id=order_id, note=text), asynchronous=False)
