"""Item gathering — commands and handler.

One command changes one item document. Bulk operations in
``shipment.workflow`` issue these commands item by item.
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.item.item import ShipmentItem
from shipment.shared.keys import ItemKey


@shipment.command(part_of="ShipmentItem")
class AssignGatherer:
    """Assign (or reassign) a courier to collect an item from its seller."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    gatherer_id = Identifier(required=True)
    gatherer_name = String(required=True, max_length=255)


@shipment.command(part_of="ShipmentItem")
class UnassignGatherer:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@shipment.command(part_of="ShipmentItem")
class RecordItemGathered:
    """The courier has collected the item."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@shipment.command(part_of="ShipmentItem")
class MarkItemArrived:
    """The item has been received at the warehouse."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@shipment.command(part_of="ShipmentItem")
class TransferItemToWarehouse:
    """Operator moves the item to the warehouse stage, skipping gathering."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@shipment.command(part_of="ShipmentItem")
class RecordItemGatheringFailure:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    notes = Text()


@shipment.command_handler(part_of=ShipmentItem)
class GatheringHandler:
    @handle(AssignGatherer)
    def assign_gatherer(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.assign_gatherer(command.gatherer_id, command.gatherer_name)
        repo.add(item)

    @handle(UnassignGatherer)
    def unassign_gatherer(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.unassign_gatherer()
        repo.add(item)

    @handle(RecordItemGathered)
    def record_item_gathered(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.record_gathered()
        repo.add(item)

    @handle(MarkItemArrived)
    def mark_item_arrived(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        if item.mark_arrived():
            repo.add(item)

    @handle(TransferItemToWarehouse)
    def transfer_item_to_warehouse(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        if item.transfer_to_warehouse():
            repo.add(item)

    @handle(RecordItemGatheringFailure)
    def record_item_gathering_failure(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.record_failure(command.reason, command.notes)
        repo.add(item)
