from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from dispatch_eta.config import RoutingConfig
from dispatch_eta.data.orders_repository import parse_timestamp
from dispatch_eta.exceptions import GeocodeNotFound, ProviderError
from dispatch_eta.models.domain import DriverOrderRef, GeoPoint, OrderRecord

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

BELAPUR = GeoPoint(19.0176, 73.0370, "Sector 10, CBD Belapur, Navi Mumbai, Maharashtra 400614, India")
NERUL = GeoPoint(19.0330, 73.0297, "Tower B, Sector 20, Nerul, Navi Mumbai, Maharashtra 400706, India")


class FakeGoogleClient:
    """Stands in for GoogleMapsClient. Geocodes by substring; routing calls fail unless a payload is set."""

    def __init__(self, places: dict[str, GeoPoint] | None = None) -> None:
        self.places = places if places is not None else {"Sector 10": BELAPUR, "Sector 20": NERUL}
        self.routes_payload: Optional[dict] = None
        self.directions_payload: Optional[dict] = None
        self.matrix_payload: Optional[dict] = None
        self.calls: list[str] = []

    def geocode(self, address: str) -> GeoPoint:
        self.calls.append("geocode")
        for needle, point in self.places.items():
            if needle in address:
                return point
        raise GeocodeNotFound(address, "ZERO_RESULTS")

    def compute_routes(self, origin: GeoPoint, destination: GeoPoint, travel_mode: str = "TWO_WHEELER") -> dict:
        self.calls.append("routes")
        if self.routes_payload is None:
            raise ProviderError("routes", "HTTP 403 from routes", status_code=403)
        return self.routes_payload

    def directions(self, origin: GeoPoint, destination: GeoPoint) -> dict:
        self.calls.append("directions")
        if self.directions_payload is None:
            raise ProviderError("directions", "status REQUEST_DENIED: denied")
        return self.directions_payload

    def distance_matrix(self, origin: GeoPoint, destination: GeoPoint) -> dict:
        self.calls.append("distance_matrix")
        if self.matrix_payload is None:
            raise ProviderError("distance_matrix", "request timed out after 8.0s")
        return self.matrix_payload


class InMemoryOrderStore:
    def __init__(self, orders: list[OrderRecord] | None = None) -> None:
        self.orders: list[OrderRecord] = list(orders or [])
        self.inserted: list[dict[str, Any]] = []

    def latest_for_driver(self, driver_id: str) -> Optional[DriverOrderRef]:
        mine = [order for order in self.orders if order.driver_id == driver_id and order.created_at]
        if not mine:
            return None
        latest = max(mine, key=lambda order: order.created_at)
        return DriverOrderRef(
            completion_time=latest.completion_time,
            estimated_delivery_time=latest.estimated_delivery_time,
            created_at=latest.created_at,
        )

    def orders_for_driver(self, driver_id: str) -> list[OrderRecord]:
        return [order for order in self.orders if order.driver_id == driver_id]

    def active_orders(self) -> list[OrderRecord]:
        return [order for order in self.orders if order.status in {"confirmed", "accepted", "picked_up"}]

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        row = {"id": len(self.inserted) + 1, **record}
        self.inserted.append(row)
        self.orders.append(
            OrderRecord(
                order_id=str(row["id"]),
                driver_id=record.get("driverid"),
                status=record.get("status"),
                created_at=parse_timestamp(record.get("created_at")),
                estimated_delivery_time=parse_timestamp(record.get("estimated_delivery_time")),
                time_text=record.get("time"),
            )
        )
        return row


def order(
    order_id: str,
    *,
    driver_id: str = "driver-1",
    status: str = "delivered",
    created_at: datetime | None = None,
    completion_time: datetime | None = None,
    estimated_delivery_time: datetime | None = None,
    time_text: str | None = None,
) -> OrderRecord:
    return OrderRecord(
        order_id=order_id,
        driver_id=driver_id,
        status=status,
        created_at=created_at or NOW - timedelta(hours=1),
        completion_time=completion_time,
        estimated_delivery_time=estimated_delivery_time,
        time_text=time_text,
        driver_name="Ravi",
    )


@pytest.fixture
def routing_config() -> RoutingConfig:
    return RoutingConfig(api_key="test-key")


@pytest.fixture
def fake_google() -> FakeGoogleClient:
    return FakeGoogleClient()


@pytest.fixture
def fixed_clock():
    return lambda: NOW
