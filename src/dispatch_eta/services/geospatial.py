"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class GreatCircleEstimator:
    """Synthesizes a road distance and travel time from the straight-line distance."""

    def __init__(self, road_indirection_factor: float = 1.4, average_speed_kmh: float = 30.0) -> None:
        if average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be positive.")
        self.road_indirection_factor = road_indirection_factor
        self.average_speed_kmh = average_speed_kmh

    def road_distance_km(self, origin: GeoPoint, destination: GeoPoint) -> float:
        straight = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
        return straight * self.road_indirection_factor

    def estimate(self, origin: GeoPoint, destination: GeoPoint) -> tuple[float, int]:
        """Return (road distance in km, duration in whole minutes)."""
        distance_km = self.road_distance_km(origin, destination)
        minutes = round(distance_km / self.average_speed_kmh * 60)
        return distance_km, int(minutes)
