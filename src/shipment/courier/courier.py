"""Courier aggregate — staff allowed to gather and distribute shipments."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from shipment.courier.events import CourierAdded, CourierRemoved
from shipment.domain import shipment


@shipment.aggregate
class Courier:
    courier_id = Identifier(identifier=True)
    display_name = String(required=True, max_length=255)
    email = String(required=True, max_length=255)
    is_active = Boolean(default=True)
    added_at = DateTime()
    removed_at = DateTime()

    @classmethod
    def add(cls, courier_id, display_name, email):
        now = datetime.now(UTC)
        courier = cls(
            courier_id=courier_id,
            display_name=display_name,
            email=email.strip().lower(),
            is_active=True,
            added_at=now,
        )
        courier.raise_(CourierAdded(courier_id=courier.courier_id, email=courier.email, added_at=now))
        return courier

    def reactivate(self, display_name: str) -> None:
        if self.is_active:
            raise ValidationError({"courier_id": ["Courier is already active"]})

        now = datetime.now(UTC)
        self.is_active = True
        self.display_name = display_name
        self.added_at = now
        self.removed_at = None
        self.raise_(CourierAdded(courier_id=self.courier_id, email=self.email, added_at=now))

    def remove(self) -> None:
        if not self.is_active:
            raise ValidationError({"courier_id": ["Courier is not active"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.removed_at = now
        self.raise_(CourierRemoved(courier_id=self.courier_id, removed_at=now))
