"""Warehouse notes on orders."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.order.order import ShipmentOrder


@shipment.command(part_of="ShipmentOrder")
class UpdateOrderNote:
    order_id = Identifier(required=True)
    note = Text()


@shipment.command_handler(part_of=ShipmentOrder)
class OrderNoteHandler:
    @handle(UpdateOrderNote)
    def update_order_note(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.update_note(command.note)
        repo.add(order)
