"""Shipment order domain events — facts about an order's distribution lifecycle."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from shipment.domain import shipment


@shipment.event(part_of="ShipmentOrder")
class ShipmentOrderRegistered:
    """A purchase entered the shipment pipeline with its line items."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier()
    delivery_option = String()
    item_count = Integer()
    registered_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class OrderReadyForDistribution:
    """Every item of the order is at the warehouse."""

    __version__ = 1

    order_id = Identifier(required=True)
    ready_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class DistributorAssigned:
    __version__ = 1

    order_id = Identifier(required=True)
    distributor_id = String(required=True)
    distributor_name = String()
    previous_distributor_id = String()
    incomplete = Boolean(default=False)
    assigned_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class DistributorUnassigned:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_distributor_id = String()
    unassigned_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class OrderInTransit:
    """The distributor left the warehouse with the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    distributor_id = String()
    in_transit_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class OrderDelivered:
    """The staged items of the order were handed to the buyer.

    ``partial`` is set when the order still awaits items, or completes an
    earlier partial delivery; the distributor is released in both cases.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    distributor_id = String()
    partial = Boolean(default=False)
    delivered_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class DistributionFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    distributor_id = String()
    reason = String(required=True)
    notes = Text()
    failed_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class OrderReturnedToGathering:
    """The order was reversed back to the gathering stage."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String()
    returned_at = DateTime(required=True)


@shipment.event(part_of="ShipmentOrder")
class OrderNoteUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    note = Text()
    updated_at = DateTime(required=True)
