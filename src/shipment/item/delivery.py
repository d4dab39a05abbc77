"""Item hand-over and recall — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.item.item import ShipmentItem
from shipment.shared.keys import ItemKey


@shipment.command(part_of="ShipmentItem")
class RecordItemHandedToBuyer:
    """Flag a staged item as physically delivered."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@shipment.command(part_of="ShipmentItem")
class RecallItemToGathering:
    """Send an item back to gathering as part of an order reversal."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@shipment.command_handler(part_of=ShipmentItem)
class ItemDeliveryHandler:
    @handle(RecordItemHandedToBuyer)
    def record_item_handed_to_buyer(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.record_delivery()
        repo.add(item)

    @handle(RecallItemToGathering)
    def recall_item_to_gathering(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.recall_to_gathering()
        repo.add(item)
