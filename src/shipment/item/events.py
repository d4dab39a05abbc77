"""Shipment item domain events — facts about a line item's gathering lifecycle."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from shipment.domain import shipment


@shipment.event(part_of="ShipmentItem")
class GathererAssigned:
    """A courier was assigned to pick the item up from its seller."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    gatherer_id = String(required=True)
    gatherer_name = String()
    previous_gatherer_id = String()
    assigned_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class GathererUnassigned:
    """The item went back to the unassigned pool."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_gatherer_id = String()
    unassigned_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemGathered:
    """The courier physically collected the item from the seller."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    gatherer_id = String()
    gathered_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemArrivedAtWarehouse:
    """The item arrived at the central warehouse."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    arrived_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemTransferredToWarehouse:
    """An operator moved the item straight to the warehouse stage."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    system_gathered = Boolean(default=False)
    arrived_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemGatheringFailed:
    """Gathering the item failed."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    reason = String(required=True)
    notes = Text()
    failed_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemHandedToBuyer:
    """The item was physically delivered as part of an order delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemRecalledToGathering:
    """The item was sent back from the warehouse to the gathering stage."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    gathering_status = String(required=True)
    recalled_at = DateTime(required=True)


@shipment.event(part_of="ShipmentItem")
class ItemNoteUpdated:
    """The warehouse note on the item was set or removed."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    note = Text()
    updated_at = DateTime(required=True)
