"""ShipmentItem aggregate (CQRS) — one order line item on its way to the warehouse.

Items live under their order (``orders/{order_id}/items/{item_id}``) and are
updated one document at a time. The gathering phase is tracked per item;
delivery is tracked per order, except for the ``delivered_in_partial`` marker
which records whether this specific item was ever handed to the buyer.

State Machine:
    PENDING → ASSIGNED → GATHERED → AT_WAREHOUSE
    ASSIGNED → ASSIGNED (reassignment)
    {ASSIGNED, GATHERED, FAILED} → AT_WAREHOUSE (arrival)
    {PENDING, ASSIGNED, GATHERED, FAILED} → AT_WAREHOUSE (operator transfer)
    {PENDING, ASSIGNED, GATHERED} → FAILED
    {ASSIGNED, GATHERED, FAILED} → PENDING (unassign)
    AT_WAREHOUSE → {ASSIGNED, PENDING} (recall)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from shipment.domain import shipment
from shipment.item.events import (
    GathererAssigned,
    GathererUnassigned,
    ItemArrivedAtWarehouse,
    ItemGathered,
    ItemGatheringFailed,
    ItemHandedToBuyer,
    ItemNoteUpdated,
    ItemRecalledToGathering,
    ItemTransferredToWarehouse,
)
from shipment.shared.delivery import DeliveryOption
from shipment.shared.keys import ItemKey

# Pseudo-gatherer written when an operator fast-tracks an item without a picker
SYSTEM_GATHERER_ID = "SYSTEM"
SYSTEM_GATHERER_NAME = "Admin Transfer"

# Legacy per-item delivery marker written by older clients
DELIVERED = "delivered"


class GatheringStatus(Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    GATHERED = "gathered"
    AT_WAREHOUSE = "at_warehouse"
    FAILED = "failed"


_ASSIGNABLE = {GatheringStatus.PENDING, GatheringStatus.ASSIGNED}
_IN_FLIGHT = {GatheringStatus.ASSIGNED, GatheringStatus.GATHERED, GatheringStatus.FAILED}


@shipment.value_object(part_of="ShipmentItem")
class SellerAddress:
    """Seller pickup location captured when the item was created."""

    address_line1 = String(max_length=255)
    latitude = Float()
    longitude = Float()


@shipment.aggregate
class ShipmentItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    buyer_id = Identifier()
    buyer_name = String(max_length=255)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=255)
    is_shop_product = Boolean(default=False)
    shop_id = Identifier()
    product_id = Identifier(required=True)
    product_name = String(max_length=500)
    quantity = Integer(required=True, min_value=1)
    delivery_option = String(choices=DeliveryOption, default=DeliveryOption.NORMAL.value)
    timestamp = DateTime(required=True)

    gathering_status = String(choices=GatheringStatus, default=GatheringStatus.PENDING.value)
    gathered_by = String(max_length=100)
    gathered_by_name = String(max_length=255)
    gathered_at = DateTime()
    arrived_at = DateTime()

    failure_reason = String(max_length=500)
    failure_notes = Text()
    failed_at = DateTime()

    delivered_in_partial = Boolean(default=False)
    partial_delivery_at = DateTime()
    delivery_status = String(max_length=50)

    seller_address = ValueObject(SellerAddress)
    seller_contact_no = String(max_length=50)

    warehouse_note = Text()
    warehouse_note_updated_at = DateTime()

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def key(self) -> ItemKey:
        return ItemKey.of(self)

    @property
    def status(self) -> GatheringStatus:
        return GatheringStatus(self.gathering_status)

    @property
    def is_at_warehouse(self) -> bool:
        return self.status == GatheringStatus.AT_WAREHOUSE

    @property
    def has_real_gatherer(self) -> bool:
        return bool(self.gathered_by) and self.gathered_by != SYSTEM_GATHERER_ID

    @property
    def is_delivered(self) -> bool:
        """Whether this item was ever physically handed to the buyer."""
        return bool(self.delivered_in_partial) or self.delivery_status == DELIVERED

    def _assert_status_in(self, allowed: set[GatheringStatus], action: str) -> None:
        if self.status not in allowed:
            raise ValidationError({"gathering_status": [f"Cannot {action} an item in {self.status.value} state"]})

    # -------------------------------------------------------------------
    # Gatherer assignment
    # -------------------------------------------------------------------
    def assign_gatherer(self, gatherer_id: str, gatherer_name: str) -> None:
        """Assign (or reassign) the courier who will collect this item."""
        self._assert_status_in(_ASSIGNABLE, "assign a gatherer to")
        now = datetime.now(UTC)
        previous = self.gathered_by
        self.gathering_status = GatheringStatus.ASSIGNED.value
        self.gathered_by = gatherer_id
        self.gathered_by_name = gatherer_name
        self.gathered_at = now
        self.raise_(
            GathererAssigned(
                order_id=self.order_id,
                item_id=self.item_id,
                gatherer_id=gatherer_id,
                gatherer_name=gatherer_name,
                previous_gatherer_id=previous,
                assigned_at=now,
            )
        )

    def unassign_gatherer(self) -> None:
        """Return the item to the unassigned pool, dropping its gatherer."""
        self._assert_status_in(_IN_FLIGHT, "unassign")
        now = datetime.now(UTC)
        previous = self.gathered_by
        self.gathering_status = GatheringStatus.PENDING.value
        self.gathered_by = None
        self.gathered_by_name = None
        self.gathered_at = None
        self.raise_(
            GathererUnassigned(
                order_id=self.order_id,
                item_id=self.item_id,
                previous_gatherer_id=previous,
                unassigned_at=now,
            )
        )

    def record_gathered(self) -> None:
        """The assigned courier has collected the item from the seller."""
        self._assert_status_in({GatheringStatus.ASSIGNED}, "record collection of")
        now = datetime.now(UTC)
        self.gathering_status = GatheringStatus.GATHERED.value
        self.gathered_at = now
        self.raise_(
            ItemGathered(
                order_id=self.order_id,
                item_id=self.item_id,
                gatherer_id=self.gathered_by,
                gathered_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Warehouse arrival
    # -------------------------------------------------------------------
    def mark_arrived(self) -> bool:
        """Record arrival at the warehouse.

        Returns False (and changes nothing) when the item is already there,
        so repeated calls keep the original ``arrived_at``.
        """
        if self.is_at_warehouse:
            return False
        self._assert_status_in(_IN_FLIGHT, "mark arrival of")

        now = datetime.now(UTC)
        self.gathering_status = GatheringStatus.AT_WAREHOUSE.value
        self.arrived_at = now
        self.raise_(ItemArrivedAtWarehouse(order_id=self.order_id, item_id=self.item_id, arrived_at=now))
        return True

    def transfer_to_warehouse(self) -> bool:
        """Operator fast-track to the warehouse stage.

        Backfills ``gathered_at`` and, for items nobody picked up, the
        SYSTEM pseudo-gatherer. No-op for items already at the warehouse.
        """
        if self.is_at_warehouse:
            return False

        now = datetime.now(UTC)
        system_gathered = not self.gathered_by
        self.gathering_status = GatheringStatus.AT_WAREHOUSE.value
        self.arrived_at = now
        if self.gathered_at is None:
            self.gathered_at = now
        if system_gathered:
            self.gathered_by = SYSTEM_GATHERER_ID
            self.gathered_by_name = SYSTEM_GATHERER_NAME
        self.raise_(
            ItemTransferredToWarehouse(
                order_id=self.order_id,
                item_id=self.item_id,
                system_gathered=system_gathered,
                arrived_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Failure
    # -------------------------------------------------------------------
    def record_failure(self, reason: str, notes: str | None = None) -> None:
        """Record that gathering failed.

        Items already at the warehouse count towards their order being
        complete; they have to be recalled before they can fail.
        """
        self._assert_status_in(
            {GatheringStatus.PENDING, GatheringStatus.ASSIGNED, GatheringStatus.GATHERED},
            "record a gathering failure for",
        )
        now = datetime.now(UTC)
        self.gathering_status = GatheringStatus.FAILED.value
        self.failure_reason = reason
        self.failure_notes = notes
        self.failed_at = now
        self.raise_(
            ItemGatheringFailed(
                order_id=self.order_id,
                item_id=self.item_id,
                reason=reason,
                notes=notes,
                failed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Delivery and recall
    # -------------------------------------------------------------------
    def record_delivery(self) -> None:
        """Mark the item as handed to the buyer."""
        self._assert_status_in({GatheringStatus.AT_WAREHOUSE}, "deliver")
        now = datetime.now(UTC)
        self.delivered_in_partial = True
        self.partial_delivery_at = now
        self.raise_(ItemHandedToBuyer(order_id=self.order_id, item_id=self.item_id, delivered_at=now))

    def recall_to_gathering(self) -> None:
        """Send the item back to the gathering stage.

        Items with a real courier stay with that courier; items with no
        gatherer or the SYSTEM pseudo-gatherer go back to the pool. The
        delivery marker is cleared in both cases.
        """
        now = datetime.now(UTC)
        if self.has_real_gatherer:
            self.gathering_status = GatheringStatus.ASSIGNED.value
        else:
            self.gathering_status = GatheringStatus.PENDING.value
            self.gathered_by = None
            self.gathered_by_name = None
            self.gathered_at = None
        self.arrived_at = None
        self.delivered_in_partial = False
        self.partial_delivery_at = None
        self.raise_(
            ItemRecalledToGathering(
                order_id=self.order_id,
                item_id=self.item_id,
                gathering_status=self.gathering_status,
                recalled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------
    def update_note(self, text: str | None) -> None:
        """Set the warehouse note; blank text removes it."""
        now = datetime.now(UTC)
        self.warehouse_note = (text or "").strip() or None
        self.warehouse_note_updated_at = now
        self.raise_(
            ItemNoteUpdated(
                order_id=self.order_id,
                item_id=self.item_id,
                note=self.warehouse_note,
                updated_at=now,
            )
        )
