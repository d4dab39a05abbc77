"""Query methods for shipment items.

The store only supports equality filters, so lookups that span several
statuses run one query per status and merge the results.
"""

from protean.exceptions import ObjectNotFoundError

from shipment.domain import shipment
from shipment.item.item import GatheringStatus, ShipmentItem
from shipment.shared.keys import ItemKey
from shipment.shared.query import QUERY_LIMIT


@shipment.repository(part_of=ShipmentItem)
class ShipmentItemRepository:
    def get_by_key(self, key: ItemKey) -> ShipmentItem:
        item = self._dao.query.filter(order_id=key.order_id, item_id=key.item_id).all().first
        if item is None:
            raise ObjectNotFoundError(f"Item `{key}` does not exist")
        return item

    def for_order(self, order_id: str) -> list[ShipmentItem]:
        """All items of an order, read fresh from the store."""
        return self._dao.query.filter(order_id=order_id).order_by("item_id").limit(QUERY_LIMIT).all().items

    def with_status(self, *statuses: GatheringStatus) -> list[ShipmentItem]:
        """Items in any of the given gathering statuses, newest first."""
        items = []
        for status in statuses:
            items.extend(
                self._dao.query.filter(gathering_status=status.value).order_by("-timestamp").limit(QUERY_LIMIT).all().items
            )
        items.sort(key=lambda item: item.timestamp, reverse=True)
        return items

    def gathered_by_courier(self, courier_id: str, *statuses: GatheringStatus) -> list[ShipmentItem]:
        items = []
        for status in statuses:
            items.extend(
                self._dao.query.filter(gathered_by=courier_id, gathering_status=status.value)
                .limit(QUERY_LIMIT)
                .all()
                .items
            )
        return items
