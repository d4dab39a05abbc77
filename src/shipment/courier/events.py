"""Courier domain events."""

from protean.fields import DateTime, Identifier, String

from shipment.domain import shipment


@shipment.event(part_of="Courier")
class CourierAdded:
    __version__ = 1

    courier_id = Identifier(required=True)
    email = String()
    added_at = DateTime(required=True)


@shipment.event(part_of="Courier")
class CourierRemoved:
    __version__ = 1

    courier_id = Identifier(required=True)
    removed_at = DateTime(required=True)
