"""Domain models for route estimation and order sequencing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class RouteQuery:
    origin: str
    destination: str


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A geocoded address."""

    lat: float
    lng: float
    formatted_address: str

    def as_param(self) -> str:
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Distance and duration between two addresses as produced by one chain stage."""

    distance_text: str
    distance_meters: float
    duration_text: str
    duration_seconds: int
    estimated: bool
    provider_label: str
    resolved_origin: str
    resolved_destination: str
    map_link_url: str
    stage: str = ""


class FailureKind(str, Enum):
    ADDRESS_INVALID = "address_invalid"
    GEOCODE_NOT_FOUND = "geocode_not_found"
    PROVIDER_ERROR = "provider_error"


@dataclass(frozen=True, slots=True)
class Failure:
    """An expected, non-exceptional failure of a geocode lookup or a chain stage."""

    kind: FailureKind
    message: str
    stage: str = ""


@dataclass(frozen=True, slots=True)
class DriverOrderRef:
    """The part of a driver's previous order needed for sequencing."""

    completion_time: Optional[datetime]
    estimated_delivery_time: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True, slots=True)
class TimelineAnchor:
    base_time: datetime
    was_adjusted_from_past: bool


@dataclass(slots=True)
class OrderRecord:
    """Represents an order row as read from the order store."""

    order_id: str
    driver_id: Optional[str]
    status: Optional[str]
    created_at: Optional[datetime]
    completion_time: Optional[datetime] = None
    estimated_delivery_time: Optional[datetime] = None
    time_text: Optional[str] = None
    distance_text: Optional[str] = None
    customer_name: Optional[str] = None
    destination: Optional[str] = None
    driver_name: Optional[str] = None
