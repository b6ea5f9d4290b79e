"""Order creation flow: route estimate, driver anchor, ETA and persistence."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from ...config import settings
from ...data.orders_repository import OrderStore, get_order_store
from ...exceptions import AddressInvalid, RouteUnavailable
from ...models.domain import RouteResult, TimelineAnchor
from ..addresses import require_routable
from ..routing import service as routing_service
from ..routing.chain import RouteProviderChain
from ..timeline.anchor import DeliveryTimelineEstimator
from ..timeline.eta import (
    COULD_NOT_CALCULATE,
    NEED_VALID_ADDRESS,
    estimated_delivery_time,
    estimated_delivery_time_from_seconds,
    utc_now,
)
from .locks import DriverLocks, driver_locks

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RouteEstimate:
    distance: str
    time: str
    route: Optional[RouteResult] = None
    error: Optional[str] = None

    @property
    def manual_entry_required(self) -> bool:
        return self.route is None


@dataclass(slots=True)
class OrderEstimate:
    route_estimate: RouteEstimate
    anchor: TimelineAnchor
    estimated_delivery_time: Optional[datetime]


@dataclass(slots=True)
class NewOrder:
    start: str
    destination: str
    customer_id: Optional[str] = None
    customer_name: str = ""
    driver_id: Optional[str] = None
    driver_name: str = ""
    driver_email: str = ""
    store_id: Optional[str] = None
    total_amount: Optional[float] = None
    payment_method: Optional[str] = None
    delivery_notes: str = ""
    manager_number: str = ""
    change_amount: Optional[float] = None
    distance: Optional[str] = None
    time: Optional[str] = None


def timeline_estimator(store: OrderStore, clock: Callable[[], datetime] = utc_now) -> DeliveryTimelineEstimator:
    return DeliveryTimelineEstimator(store, settings.timeline_config(), clock=clock)


def estimate_route(start: str, destination: str, chain: RouteProviderChain | None = None) -> RouteEstimate:
    """Route enrichment for an order. Failures degrade to placeholder text, never an error."""
    try:
        require_routable(start)
        require_routable(destination)
    except AddressInvalid as exc:
        logger.info(f"Cannot calculate route: {exc}")
        return RouteEstimate(distance=NEED_VALID_ADDRESS, time=NEED_VALID_ADDRESS, error=str(exc))
    try:
        route = routing_service.resolve_route(start, destination, chain)
    except RouteUnavailable as exc:
        logger.warning(f"Route calculation failed, manual entry required: {exc}")
        return RouteEstimate(distance=COULD_NOT_CALCULATE, time=COULD_NOT_CALCULATE, error=str(exc))
    return RouteEstimate(distance=route.distance_text, time=route.duration_text, route=route)


def _eta(route_estimate: RouteEstimate, base_time: datetime, manual_time: str | None = None) -> datetime | None:
    if route_estimate.route is not None:
        return estimated_delivery_time_from_seconds(route_estimate.route.duration_seconds, base_time)
    return estimated_delivery_time(manual_time, base_time)


def estimate_order(
    start: str,
    destination: str,
    driver_id: str | None = None,
    *,
    chain: RouteProviderChain | None = None,
    store: OrderStore | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> OrderEstimate:
    """Preview of what submission would record. Writes nothing."""
    route_estimate = estimate_route(start, destination, chain)
    anchor = _anchor(driver_id, store, clock)
    return OrderEstimate(
        route_estimate=route_estimate,
        anchor=anchor,
        estimated_delivery_time=_eta(route_estimate, anchor.base_time),
    )


def _anchor(driver_id: str | None, store: OrderStore | None, clock: Callable[[], datetime]) -> TimelineAnchor:
    if not driver_id:
        return TimelineAnchor(base_time=clock(), was_adjusted_from_past=False)
    return timeline_estimator(store or get_order_store(), clock).anchor_for(driver_id)


def create_order(
    order: NewOrder,
    *,
    chain: RouteProviderChain | None = None,
    store: OrderStore | None = None,
    locks: DriverLocks = driver_locks,
    clock: Callable[[], datetime] = utc_now,
) -> tuple[dict[str, Any], OrderEstimate]:
    """Insert a new order anchored after the driver's previous one.

    The route is resolved before the driver lock is taken. Anchor computation and
    insert happen under the lock, so a concurrent submission for the same driver
    reads this order as its predecessor.
    """
    store = store or get_order_store()
    route_estimate = estimate_route(order.start, order.destination, chain)
    distance = order.distance if route_estimate.manual_entry_required and order.distance else route_estimate.distance
    time_text = order.time if route_estimate.manual_entry_required and order.time else route_estimate.time

    with locks.hold(order.driver_id):
        anchor = _anchor(order.driver_id, store, clock)
        eta = _eta(route_estimate, anchor.base_time, manual_time=time_text)
        record = _order_record(order, distance, time_text, anchor, eta, route_estimate.route)
        row = store.insert(record)

    return row, OrderEstimate(route_estimate=route_estimate, anchor=anchor, estimated_delivery_time=eta)


def _order_record(
    order: NewOrder,
    distance: str,
    time_text: str,
    anchor: TimelineAnchor,
    eta: datetime | None,
    route: RouteResult | None,
) -> dict[str, Any]:
    return {
        "customerid": order.customer_id,
        "customername": order.customer_name,
        "storeid": order.store_id,
        "start": order.start,
        "destination": order.destination,
        "total_amount": order.total_amount,
        "payment_method": order.payment_method,
        "payment_status": "pending",
        "status": "confirmed" if order.driver_id else "pending",
        "delivery_notes": order.delivery_notes,
        "managernumber": order.manager_number,
        "driverid": order.driver_id,
        "drivername": order.driver_name,
        "driveremail": order.driver_email,
        "distance": distance,
        "time": time_text,
        "duration_seconds": route.duration_seconds if route else None,
        "change_amount": order.change_amount,
        "created_at": anchor.base_time.isoformat(),
        "estimated_delivery_time": eta.isoformat() if eta else None,
    }
