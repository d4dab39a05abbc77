"""Order distribution — commands and handler.

Each command touches the order header only. Flagging the delivered items is
driven item by item from ``shipment.workflow.distribution``.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.order.order import ShipmentOrder


@shipment.command(part_of="ShipmentOrder")
class MarkOrderReady:
    """All items of the order are at the warehouse."""

    order_id = Identifier(required=True)


@shipment.command(part_of="ShipmentOrder")
class AssignDistributor:
    order_id = Identifier(required=True)
    distributor_id = Identifier(required=True)
    distributor_name = String(required=True, max_length=255)


@shipment.command(part_of="ShipmentOrder")
class UnassignDistributor:
    order_id = Identifier(required=True)


@shipment.command(part_of="ShipmentOrder")
class MarkOrderInTransit:
    order_id = Identifier(required=True)


@shipment.command(part_of="ShipmentOrder")
class RecordOrderDelivered:
    """Record delivery of the staged items on the order header."""

    order_id = Identifier(required=True)
    retain_distributor = Boolean(default=True)


@shipment.command(part_of="ShipmentOrder")
class RecordDistributionFailure:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    notes = Text()


@shipment.command(part_of="ShipmentOrder")
class ReturnOrderToGathering:
    """Reset the order header before its items are recalled."""

    order_id = Identifier(required=True)


@shipment.command_handler(part_of=ShipmentOrder)
class DistributionHandler:
    @handle(MarkOrderReady)
    def mark_order_ready(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        if order.mark_ready():
            repo.add(order)

    @handle(AssignDistributor)
    def assign_distributor(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.assign_distributor(command.distributor_id, command.distributor_name)
        repo.add(order)

    @handle(UnassignDistributor)
    def unassign_distributor(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.unassign_distributor()
        repo.add(order)

    @handle(MarkOrderInTransit)
    def mark_order_in_transit(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.mark_in_transit()
        repo.add(order)

    @handle(RecordOrderDelivered)
    def record_order_delivered(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.record_delivery(retain_distributor=command.retain_distributor)
        repo.add(order)

    @handle(RecordDistributionFailure)
    def record_distribution_failure(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.record_failure(command.reason, command.notes)
        repo.add(order)

    @handle(ReturnOrderToGathering)
    def return_order_to_gathering(self, command):
        repo = current_domain.repository_for(ShipmentOrder)
        order = repo.get(command.order_id)
        order.return_to_gathering()
        repo.add(order)
