"""On-time and delay evaluation of delivered and in-flight orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ...data.orders_repository import ACTIVE_STATUSES
from ...models.domain import OrderRecord
from ..timeline.durations import parse_minutes


@dataclass(slots=True)
class DriverPerformance:
    driver_id: str
    driver_name: Optional[str] = None
    total_orders: int = 0
    completed_orders: int = 0
    cancelled_orders: int = 0
    on_time_deliveries: int = 0
    late_deliveries: int = 0
    percent_on_time: int = 0
    avg_delivery_minutes: int = 0
    total_delivery_minutes: int = 0


@dataclass(slots=True)
class DelayedOrder:
    order: OrderRecord
    expected_delivery_time: datetime
    minutes_overdue: int


def has_timing(order: OrderRecord) -> bool:
    return order.estimated_delivery_time is not None and order.completion_time is not None


def is_on_time(order: OrderRecord) -> bool:
    if order.status != "delivered" or not has_timing(order):
        return False
    return order.completion_time <= order.estimated_delivery_time


def time_diff_minutes(order: OrderRecord) -> int | None:
    """Completion minus estimate in whole minutes; negative means early."""
    if not has_timing(order):
        return None
    delta = order.completion_time - order.estimated_delivery_time
    return round(delta.total_seconds() / 60)


def format_time_diff(order: OrderRecord) -> str:
    diff = time_diff_minutes(order)
    if diff is None:
        return "N/A"
    if diff <= 0:
        return f"{abs(diff)} mins early"
    return f"{diff} mins late"


def delivery_status_label(order: OrderRecord) -> str:
    if order.status == "cancelled":
        return "Cancelled"
    if order.status != "delivered":
        return order.status or "unknown"
    if not has_timing(order):
        return "Completed"
    return "On-Time" if is_on_time(order) else "Late"


def summarize_driver(driver_id: str, orders: Iterable[OrderRecord]) -> DriverPerformance:
    summary = DriverPerformance(driver_id=driver_id)
    for order in orders:
        if order.driver_id != driver_id:
            continue
        summary.driver_name = summary.driver_name or order.driver_name
        summary.total_orders += 1
        if order.status == "delivered":
            summary.completed_orders += 1
            if has_timing(order):
                if order.created_at is not None:
                    elapsed = order.completion_time - order.created_at
                    summary.total_delivery_minutes += round(elapsed.total_seconds() / 60)
                if is_on_time(order):
                    summary.on_time_deliveries += 1
                else:
                    summary.late_deliveries += 1
        elif order.status == "cancelled":
            summary.cancelled_orders += 1

    judged = summary.on_time_deliveries + summary.late_deliveries
    if judged:
        summary.percent_on_time = round(summary.on_time_deliveries / judged * 100)
    if summary.completed_orders:
        summary.avg_delivery_minutes = round(summary.total_delivery_minutes / summary.completed_orders)
    return summary


def expected_delivery_time(order: OrderRecord) -> datetime | None:
    """The stored ETA; rows written without one fall back to created_at plus the quoted time."""
    if order.estimated_delivery_time is not None:
        return order.estimated_delivery_time
    minutes = parse_minutes(order.time_text)
    if not minutes or order.created_at is None:
        return None
    return order.created_at + timedelta(minutes=minutes)


def find_delayed_orders(orders: Iterable[OrderRecord], now: datetime) -> list[DelayedOrder]:
    """Active orders whose expected delivery time has already passed."""
    delayed: list[DelayedOrder] = []
    for order in orders:
        if order.status not in ACTIVE_STATUSES:
            continue
        expected = expected_delivery_time(order)
        if expected is None or now <= expected:
            continue
        overdue = int((now - expected).total_seconds() // 60)
        delayed.append(DelayedOrder(order=order, expected_delivery_time=expected, minutes_overdue=overdue))
    return delayed
