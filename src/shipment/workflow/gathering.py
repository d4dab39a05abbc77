"""Gathering stage — seller-grouped item lists and bulk item operations."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from shipment.courier.management import get_active_courier
from shipment.item.gathering import (
    AssignGatherer,
    MarkItemArrived,
    RecordItemGathered,
    RecordItemGatheringFailure,
    UnassignGatherer,
)
from shipment.item.item import GatheringStatus, SellerAddress, ShipmentItem
from shipment.item.notes import UpdateItemNote
from shipment.shared.keys import ItemKey
from shipment.utils.logging import get_logger
from shipment.workflow.predicates import item_matches_search
from shipment.workflow.results import BulkResult, TransferResult, process_each
from shipment.workflow.transfer import refresh_readiness_after

logger = get_logger(__name__)

UNASSIGNED_STATUSES = (GatheringStatus.PENDING,)
ASSIGNED_STATUSES = (GatheringStatus.ASSIGNED, GatheringStatus.GATHERED, GatheringStatus.FAILED)


@dataclass
class SellerGroup:
    """Items to collect from one seller."""

    seller_id: str
    seller_name: str | None
    is_shop_product: bool
    seller_address: SellerAddress | None = None
    seller_contact_no: str | None = None
    items: list[ShipmentItem] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def item_keys(self) -> list[ItemKey]:
        return [item.key for item in self.items]


def group_items_by_seller(items: Iterable[ShipmentItem]) -> list[SellerGroup]:
    """Group items by seller, keeping groups and items in their incoming order."""
    groups: dict[str, SellerGroup] = {}
    for item in items:
        group = groups.get(item.seller_id)
        if group is None:
            group = groups[item.seller_id] = SellerGroup(
                seller_id=item.seller_id,
                seller_name=item.seller_name,
                is_shop_product=bool(item.is_shop_product),
                seller_address=item.seller_address,
                seller_contact_no=item.seller_contact_no,
            )
        group.items.append(item)
    return list(groups.values())


def _list_groups(statuses, search):
    items = current_domain.repository_for(ShipmentItem).with_status(*statuses)
    return group_items_by_seller(item for item in items if item_matches_search(item, search))


def list_unassigned_gathering_groups(search: str | None = None) -> list[SellerGroup]:
    return _list_groups(UNASSIGNED_STATUSES, search)


def list_assigned_gathering_groups(search: str | None = None) -> list[SellerGroup]:
    return _list_groups(ASSIGNED_STATUSES, search)


def assign_items_to_gatherer(item_keys: Iterable[ItemKey], gatherer_id: str) -> BulkResult:
    """Assign items to a courier, one item write at a time.

    The courier is resolved before anything is written; an unknown or
    inactive courier fails the whole call.
    """
    courier = get_active_courier(gatherer_id)
    keys = list(dict.fromkeys(item_keys))
    result = process_each(
        (
            key,
            AssignGatherer(
                order_id=key.order_id,
                item_id=key.item_id,
                gatherer_id=courier.courier_id,
                gatherer_name=courier.display_name,
            ),
        )
        for key in keys
    )
    logger.info(
        "Items assigned to gatherer",
        gatherer_id=courier.courier_id,
        succeeded=len(result.succeeded),
        failed=len(result.failed),
    )
    return result


def unassign_gatherer(order_id: str, item_id: str) -> None:
    current_domain.process(UnassignGatherer(order_id=order_id, item_id=item_id), asynchronous=False)
    logger.info("Gatherer unassigned", order_id=order_id, item_id=item_id)


def mark_items_gathered(item_keys: Iterable[ItemKey]) -> BulkResult:
    keys = list(dict.fromkeys(item_keys))
    result = process_each((key, RecordItemGathered(order_id=key.order_id, item_id=key.item_id)) for key in keys)
    logger.info("Items gathered", succeeded=len(result.succeeded), failed=len(result.failed))
    return result


def mark_items_arrived(item_keys: Iterable[ItemKey]) -> TransferResult:
    """Record warehouse arrival, then recompute readiness of the touched orders."""
    keys = list(dict.fromkeys(item_keys))
    result = process_each(
        ((key, MarkItemArrived(order_id=key.order_id, item_id=key.item_id)) for key in keys),
        TransferResult(),
    )
    refresh_readiness_after(result)
    logger.info(
        "Items arrived at warehouse",
        succeeded=len(result.succeeded),
        failed=len(result.failed),
        ready_orders=result.ready_orders,
    )
    return result


def record_item_failure(order_id: str, item_id: str, reason: str, notes: str | None = None) -> None:
    current_domain.process(
        RecordItemGatheringFailure(order_id=order_id, item_id=item_id, reason=reason, notes=notes),
        asynchronous=False,
    )
    logger.info("Item gathering failed", order_id=order_id, item_id=item_id, reason=reason)


def update_item_note(order_id: str, item_id: str, text: str | None) -> None:
    current_domain.process(UpdateItemNote(order_id=order_id, item_id=item_id, note=text), asynchronous=False)
