"""Courier registry — commands, handler and lookups.

Gatherer and distributor names are always resolved from the registry, never
taken from the caller.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipment.courier.courier import Courier
from shipment.domain import shipment


@shipment.command(part_of="Courier")
class AddCourier:
    """Mark a staff member as a courier, re-activating a removed one."""

    courier_id = Identifier(required=True)
    display_name = String(required=True, max_length=255)
    email = String(required=True, max_length=255)


@shipment.command(part_of="Courier")
class RemoveCourier:
    courier_id = Identifier(required=True)


@shipment.command_handler(part_of=Courier)
class CourierHandler:
    @handle(AddCourier)
    def add_courier(self, command):
        repo = current_domain.repository_for(Courier)
        try:
            courier = repo.get(command.courier_id)
        except ObjectNotFoundError:
            courier = Courier.add(command.courier_id, command.display_name, command.email)
        else:
            courier.reactivate(command.display_name)
        repo.add(courier)
        return courier.courier_id

    @handle(RemoveCourier)
    def remove_courier(self, command):
        repo = current_domain.repository_for(Courier)
        courier = repo.get(command.courier_id)
        courier.remove()
        repo.add(courier)


def list_active_couriers() -> list[Courier]:
    repo = current_domain.repository_for(Courier)
    couriers = repo._dao.query.filter(is_active=True).all().items
    return sorted(couriers, key=lambda courier: (courier.display_name or "").lower())


def get_active_courier(courier_id: str) -> Courier:
    """Fetch a courier that may currently take assignments."""
    courier = current_domain.repository_for(Courier).get(courier_id)
    if not courier.is_active:
        raise ObjectNotFoundError(f"Courier `{courier_id}` is not active")
    return courier
