"""Courier workload — what each courier currently has in hand."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from shipment.courier.management import get_active_courier, list_active_couriers
from shipment.item.item import GatheringStatus, ShipmentItem
from shipment.order.order import DistributionStatus, ShipmentOrder


@dataclass
class CourierWorkload:
    courier_id: str
    display_name: str
    gathering: list[ShipmentItem] = field(default_factory=list)
    distribution: list[ShipmentOrder] = field(default_factory=list)

    @property
    def gathering_count(self) -> int:
        return len(self.gathering)

    @property
    def distribution_count(self) -> int:
        return len(self.distribution)


def _workload_for(courier) -> CourierWorkload:
    items = current_domain.repository_for(ShipmentItem).gathered_by_courier(
        courier.courier_id, GatheringStatus.ASSIGNED, GatheringStatus.GATHERED
    )
    orders = current_domain.repository_for(ShipmentOrder).distributed_by_courier(
        courier.courier_id, DistributionStatus.ASSIGNED, DistributionStatus.DISTRIBUTED
    )
    return CourierWorkload(
        courier_id=courier.courier_id,
        display_name=courier.display_name,
        gathering=items,
        distribution=orders,
    )


def courier_workload(courier_id: str) -> CourierWorkload:
    return _workload_for(get_active_courier(courier_id))


def courier_workloads() -> list[CourierWorkload]:
    return [_workload_for(courier) for courier in list_active_couriers()]
