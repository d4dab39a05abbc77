"""ShipmentOrder aggregate (CQRS) — the order header that moves through distribution.

The header carries the order-level fulfillment fields. ``all_items_gathered``
mirrors the state of the order's items and is only flipped by the workflow
layer after re-reading those items from the store.

Distribution State Machine:
    None/PENDING → READY (all items at warehouse)
    READY → ASSIGNED → DISTRIBUTED → DELIVERED
    any → ASSIGNED (reassignment, incomplete orders need confirmation upstream)
    {ASSIGNED, DISTRIBUTED, FAILED} → READY (unassign)
    {ASSIGNED, DISTRIBUTED} → FAILED
    any → None (returned to gathering)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Identifier,
    String,
    Text,
    ValueObject,
)

from shipment.domain import shipment
from shipment.order.events import (
    DistributionFailed,
    DistributorAssigned,
    DistributorUnassigned,
    OrderDelivered,
    OrderInTransit,
    OrderNoteUpdated,
    OrderReadyForDistribution,
    OrderReturnedToGathering,
    ShipmentOrderRegistered,
)
from shipment.shared.delivery import DeliveryOption


class DistributionStatus(Enum):
    PENDING = "pending"
    READY = "ready"
    ASSIGNED = "assigned"
    DISTRIBUTED = "distributed"
    DELIVERED = "delivered"
    FAILED = "failed"


_HELD_BY_DISTRIBUTOR = (DistributionStatus.ASSIGNED, DistributionStatus.DISTRIBUTED, DistributionStatus.FAILED)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@shipment.value_object(part_of="ShipmentOrder")
class ShippingAddress:
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    phone_number = String(max_length=50)


@shipment.value_object(part_of="ShipmentOrder")
class PickupPoint:
    """A collection point the buyer picks the order up from."""

    pickup_point_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    address = String(required=True, max_length=500)
    phone = String(max_length=50)
    hours = String(max_length=255)
    contact_person = String(max_length=255)
    notes = Text()
    latitude = Float()
    longitude = Float()


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@shipment.aggregate
class ShipmentOrder:
    order_id = Identifier(identifier=True)
    buyer_id = Identifier()
    buyer_name = String(max_length=255)
    address = ValueObject(ShippingAddress)
    pickup_point = ValueObject(PickupPoint)
    delivery_option = String(choices=DeliveryOption, default=DeliveryOption.NORMAL.value)
    timestamp = DateTime(required=True)

    all_items_gathered = Boolean(default=False)
    distribution_status = String(choices=DistributionStatus)
    distributed_by = String(max_length=100)
    distributed_by_name = String(max_length=255)
    distributed_at = DateTime()
    delivered_at = DateTime()

    failure_reason = String(max_length=500)
    failure_notes = Text()
    failed_at = DateTime()

    warehouse_note = Text()
    warehouse_note_updated_at = DateTime()

    @invariant.post
    def exactly_one_destination(self):
        if (self.address is None) == (self.pickup_point is None):
            raise ValidationError({"destination": ["Order must have either a shipping address or a pickup point"]})

    @classmethod
    def register(cls, order_id, buyer_id, buyer_name, delivery_option, timestamp=None, address=None, pickup_point=None, item_count=0):
        order = cls(
            order_id=order_id,
            buyer_id=buyer_id,
            buyer_name=buyer_name,
            delivery_option=delivery_option or DeliveryOption.NORMAL.value,
            timestamp=timestamp or datetime.now(UTC),
            address=ShippingAddress(**address) if address else None,
            pickup_point=PickupPoint(**pickup_point) if pickup_point else None,
        )
        order.raise_(
            ShipmentOrderRegistered(
                order_id=order.order_id,
                buyer_id=buyer_id,
                delivery_option=order.delivery_option,
                item_count=item_count,
                registered_at=order.timestamp,
            )
        )
        return order

    @property
    def status(self) -> DistributionStatus | None:
        return DistributionStatus(self.distribution_status) if self.distribution_status else None

    @property
    def was_partially_delivered(self) -> bool:
        """Delivered once already, with the distributor released for the remainder."""
        return self.delivered_at is not None and not self.distributed_by

    # -------------------------------------------------------------------
    # Readiness
    # -------------------------------------------------------------------
    def mark_ready(self) -> bool:
        """Flip the order to ready once every item is at the warehouse.

        Returns False for orders that are already flagged. An order still
        held by a distributor keeps its status and distributor; only the
        gathered flag changes.
        """
        if self.all_items_gathered:
            return False
        now = datetime.now(UTC)
        self.all_items_gathered = True
        if self.status not in _HELD_BY_DISTRIBUTOR:
            self.distribution_status = DistributionStatus.READY.value
        self.raise_(OrderReadyForDistribution(order_id=self.order_id, ready_at=now))
        return True

    # -------------------------------------------------------------------
    # Distributor assignment
    # -------------------------------------------------------------------
    def assign_distributor(self, distributor_id: str, distributor_name: str) -> None:
        now = datetime.now(UTC)
        previous = self.distributed_by
        self.distribution_status = DistributionStatus.ASSIGNED.value
        self.distributed_by = distributor_id
        self.distributed_by_name = distributor_name
        self.distributed_at = now
        self.raise_(
            DistributorAssigned(
                order_id=self.order_id,
                distributor_id=distributor_id,
                distributor_name=distributor_name,
                previous_distributor_id=previous,
                incomplete=not self.all_items_gathered,
                assigned_at=now,
            )
        )

    def unassign_distributor(self) -> None:
        if not self.distributed_by:
            raise ValidationError({"distributed_by": ["Order has no distributor to unassign"]})

        now = datetime.now(UTC)
        previous = self.distributed_by
        self.distribution_status = DistributionStatus.READY.value
        self.distributed_by = None
        self.distributed_by_name = None
        self.distributed_at = None
        self.raise_(
            DistributorUnassigned(
                order_id=self.order_id,
                previous_distributor_id=previous,
                unassigned_at=now,
            )
        )

    def mark_in_transit(self) -> None:
        if self.status != DistributionStatus.ASSIGNED:
            raise ValidationError({"distribution_status": ["Only assigned orders can go out for delivery"]})

        now = datetime.now(UTC)
        self.distribution_status = DistributionStatus.DISTRIBUTED.value
        self.raise_(OrderInTransit(order_id=self.order_id, distributor_id=self.distributed_by, in_transit_at=now))

    # -------------------------------------------------------------------
    # Delivery and failure
    # -------------------------------------------------------------------
    def record_delivery(self, retain_distributor: bool) -> None:
        """Record a delivery of the staged items.

        A partial delivery, or the completion of an earlier one, releases
        the distributor so the order shows up for a fresh assignment.
        """
        now = datetime.now(UTC)
        distributor = self.distributed_by
        self.distribution_status = DistributionStatus.DELIVERED.value
        self.delivered_at = now
        if not retain_distributor:
            self.distributed_by = None
            self.distributed_by_name = None
            self.distributed_at = None
        self.raise_(
            OrderDelivered(
                order_id=self.order_id,
                distributor_id=distributor,
                partial=not retain_distributor,
                delivered_at=now,
            )
        )

    def record_failure(self, reason: str, notes: str | None = None) -> None:
        if self.status not in (DistributionStatus.ASSIGNED, DistributionStatus.DISTRIBUTED):
            raise ValidationError({"distribution_status": ["Only orders out with a distributor can fail delivery"]})

        now = datetime.now(UTC)
        self.distribution_status = DistributionStatus.FAILED.value
        self.failure_reason = reason
        self.failure_notes = notes
        self.failed_at = now
        self.raise_(
            DistributionFailed(
                order_id=self.order_id,
                distributor_id=self.distributed_by,
                reason=reason,
                notes=notes,
                failed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Reversal
    # -------------------------------------------------------------------
    def return_to_gathering(self) -> None:
        """Reset the header so the order re-enters the gathering stage."""
        now = datetime.now(UTC)
        previous = self.distribution_status
        self.all_items_gathered = False
        self.distribution_status = None
        self.distributed_by = None
        self.distributed_by_name = None
        self.distributed_at = None
        self.delivered_at = None
        self.raise_(
            OrderReturnedToGathering(
                order_id=self.order_id,
                previous_status=previous,
                returned_at=now,
            )
        )

    def update_note(self, text: str | None) -> None:
        now = datetime.now(UTC)
        self.warehouse_note = (text or "").strip() or None
        self.warehouse_note_updated_at = now
        self.raise_(OrderNoteUpdated(order_id=self.order_id, note=self.warehouse_note, updated_at=now))
