"""Warehouse notes on items."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.item.item import ShipmentItem
from shipment.shared.keys import ItemKey


@shipment.command(part_of="ShipmentItem")
class UpdateItemNote:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    note = Text()


@shipment.command_handler(part_of=ShipmentItem)
class ItemNoteHandler:
    @handle(UpdateItemNote)
    def update_item_note(self, command):
        repo = current_domain.repository_for(ShipmentItem)
        item = repo.get_by_key(ItemKey(command.order_id, command.item_id))
        item.update_note(command.note)
        repo.add(item)
