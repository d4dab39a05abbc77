"""Delivered archive — read-only views over delivered orders."""

import calendar
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.utils.globals import current_domain

from shipment.order.order import ShipmentOrder
from shipment.workflow.combined import CombinedOrder, combine
from shipment.workflow.predicates import matches_search


class DeliveryWindow(Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


@dataclass(frozen=True)
class DeliveryStats:
    today: int
    week: int
    total: int


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start(window: DeliveryWindow, now: datetime | None = None) -> datetime | None:
    """Earliest ``delivered_at`` inside the window; None means unbounded."""
    now = now or datetime.now(UTC)
    if window == DeliveryWindow.TODAY:
        return _start_of_day(now)
    if window == DeliveryWindow.WEEK:
        return now - timedelta(days=7)
    if window == DeliveryWindow.MONTH:
        return _one_month_before(now)
    return None


def list_delivered(
    window: DeliveryWindow = DeliveryWindow.TODAY, now: datetime | None = None, search: str | None = None
) -> list[CombinedOrder]:
    """Orders with a recorded delivery inside the window, latest delivery first."""
    start = window_start(window, now)
    orders = current_domain.repository_for(ShipmentOrder).ever_delivered()
    if start is not None:
        orders = [order for order in orders if order.delivered_at >= start]
    orders = sorted(orders, key=lambda order: order.delivered_at, reverse=True)
    return [combined for combined in combine(orders) if matches_search(combined, search)]


def is_partial_delivery(combined: CombinedOrder) -> bool:
    """Some, but not all, of the order's items reached the buyer."""
    delivered = sum(1 for item in combined.items if item.is_delivered)
    return 0 < delivered < len(combined.items)


def delivery_stats(orders: list[CombinedOrder], now: datetime | None = None) -> DeliveryStats:
    now = now or datetime.now(UTC)
    today_start = _start_of_day(now)
    week_start = now - timedelta(days=7)
    delivered = [combined.order.delivered_at for combined in orders if combined.order.delivered_at]
    return DeliveryStats(
        today=sum(1 for moment in delivered if moment >= today_start),
        week=sum(1 for moment in delivered if moment >= week_start),
        total=len(delivered),
    )


def delivery_duration(order: ShipmentOrder) -> timedelta | None:
    """Time from handing the order to its distributor until delivery."""
    if order.distributed_at is None or order.delivered_at is None:
        return None
    return order.delivered_at - order.distributed_at
