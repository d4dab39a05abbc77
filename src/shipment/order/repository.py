"""Query methods for shipment orders."""

from shipment.domain import shipment
from shipment.order.order import DistributionStatus, ShipmentOrder
from shipment.shared.query import QUERY_LIMIT


@shipment.repository(part_of=ShipmentOrder)
class ShipmentOrderRepository:
    def gathered_with_status(self, *statuses: DistributionStatus) -> list[ShipmentOrder]:
        """Fully gathered orders in any of the given distribution statuses."""
        orders = []
        for status in statuses:
            orders.extend(
                self._dao.query.filter(all_items_gathered=True, distribution_status=status.value)
                .order_by("-timestamp")
                .limit(QUERY_LIMIT)
                .all()
                .items
            )
        return orders

    def incomplete(self) -> list[ShipmentOrder]:
        """Orders still waiting for at least one item."""
        return self._dao.query.filter(all_items_gathered=False).order_by("-timestamp").limit(QUERY_LIMIT).all().items

    def ever_delivered(self) -> list[ShipmentOrder]:
        return self._dao.query.exclude(delivered_at=None).order_by("-delivered_at").limit(QUERY_LIMIT).all().items

    def distributed_by_courier(self, courier_id: str, *statuses: DistributionStatus) -> list[ShipmentOrder]:
        orders = []
        for status in statuses:
            orders.extend(
                self._dao.query.filter(distributed_by=courier_id, distribution_status=status.value)
                .limit(QUERY_LIMIT)
                .all()
                .items
            )
        return orders
