"""Order header plus its line items, always rebuilt from the store."""

from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shipment.item.item import GatheringStatus, ShipmentItem
from shipment.order.order import ShipmentOrder
from shipment.utils.logging import get_logger
from shipment.workflow.results import BulkResult

logger = get_logger(__name__)


@dataclass
class CombinedOrder:
    order: ShipmentOrder
    items: list[ShipmentItem] = field(default_factory=list)

    @property
    def order_id(self) -> str:
        return self.order.order_id

    @property
    def staged_items(self) -> list[ShipmentItem]:
        """Items currently at the warehouse."""
        return [item for item in self.items if item.gathering_status == GatheringStatus.AT_WAREHOUSE.value]

    @property
    def missing_items(self) -> list[ShipmentItem]:
        return [item for item in self.items if item.gathering_status != GatheringStatus.AT_WAREHOUSE.value]


def load_combined_order(order_id: str) -> CombinedOrder:
    order = current_domain.repository_for(ShipmentOrder).get(order_id)
    return CombinedOrder(order=order, items=current_domain.repository_for(ShipmentItem).for_order(order_id))


def load_each(order_ids: list[str], result: BulkResult) -> list[CombinedOrder]:
    """Load every order, recording unknown ids as failures on ``result``."""
    loaded = []
    for order_id in order_ids:
        try:
            loaded.append(load_combined_order(order_id))
        except ObjectNotFoundError as exc:
            logger.warning("Order not found", order_id=order_id)
            result.record_failure(order_id, exc)
    return loaded


def combine(orders: list[ShipmentOrder]) -> list[CombinedOrder]:
    item_repo = current_domain.repository_for(ShipmentItem)
    return [CombinedOrder(order=order, items=item_repo.for_order(order.order_id)) for order in orders]
