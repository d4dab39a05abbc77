"""Daily deliveries — operations dashboard counters per day."""

from datetime import datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.order.events import (
    OrderDelivered,
    OrderReadyForDistribution,
    OrderReturnedToGathering,
    ShipmentOrderRegistered,
)
from shipment.order.order import ShipmentOrder


@shipment.projection
class DailyDeliveriesView:
    """Daily aggregate of shipment throughput."""

    id = Identifier(identifier=True)
    date = String(required=True)  # ISO date string YYYY-MM-DD
    total_registered = Integer(default=0)
    total_ready = Integer(default=0)
    total_delivered = Integer(default=0)
    total_partial = Integer(default=0)
    total_reversed = Integer(default=0)
    updated_at = DateTime()


def _date_key(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d") if dt else ""


def _get_or_create(date_str: str, timestamp: datetime) -> DailyDeliveriesView:
    repo = current_domain.repository_for(DailyDeliveriesView)
    try:
        return repo.get(date_str)
    except ObjectNotFoundError:
        return DailyDeliveriesView(id=date_str, date=date_str, updated_at=timestamp)


def _bump(counter: str, timestamp: datetime) -> None:
    view = _get_or_create(_date_key(timestamp), timestamp)
    setattr(view, counter, (getattr(view, counter) or 0) + 1)
    view.updated_at = timestamp
    current_domain.repository_for(DailyDeliveriesView).add(view)


@shipment.projector(projector_for=DailyDeliveriesView, aggregates=[ShipmentOrder])
class DailyDeliveriesProjector:
    @on(ShipmentOrderRegistered)
    def on_order_registered(self, event):
        _bump("total_registered", event.registered_at)

    @on(OrderReadyForDistribution)
    def on_order_ready(self, event):
        _bump("total_ready", event.ready_at)

    @on(OrderDelivered)
    def on_order_delivered(self, event):
        _bump("total_partial" if event.partial else "total_delivered", event.delivered_at)

    @on(OrderReturnedToGathering)
    def on_order_returned(self, event):
        _bump("total_reversed", event.returned_at)
