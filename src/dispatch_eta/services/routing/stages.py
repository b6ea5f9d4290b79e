"""Route chain stages, ordered from most to least precise."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ...config import RoutingConfig
from ...exceptions import ProviderError
from ...models.domain import Failure, FailureKind, GeoPoint, RouteResult
from ..geospatial import GreatCircleEstimator
from ..outputs.route_formatter import build_maps_link, format_distance, format_duration
from .geocoding import GeocodingClient
from .google_client import GoogleMapsClient, parse_duration_seconds

logger = logging.getLogger(__name__)

PRECISE_FALLBACK_LABEL = "two-wheeler route"
DRIVING_FALLBACK_LABEL = "fastest driving route"
MATRIX_LABEL = "distance matrix"
ESTIMATED_LABEL = "estimated route"


class RouteStage(ABC):
    """Contract for one strategy in the route fallback chain."""

    name = "stage"

    def __init__(self, geocoder: GeocodingClient) -> None:
        self.geocoder = geocoder

    def run(self, origin: str, destination: str) -> RouteResult | Failure:
        """Never raises; any error inside the stage becomes a Failure so the chain moves on."""
        try:
            endpoints = self._geocode_pair(origin, destination)
            if isinstance(endpoints, Failure):
                return endpoints
            start, end = endpoints
            return self.route(start, end)
        except ProviderError as exc:
            return Failure(FailureKind.PROVIDER_ERROR, str(exc), self.name)
        except Exception as exc:
            logger.warning(f"Stage {self.name} hit an unexpected error: {exc!r}")
            return Failure(FailureKind.PROVIDER_ERROR, f"malformed provider response: {exc!r}", self.name)

    @abstractmethod
    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResult:
        raise NotImplementedError

    def _geocode_pair(self, origin: str, destination: str) -> tuple[GeoPoint, GeoPoint] | Failure:
        start = self.geocoder.geocode(origin)
        if isinstance(start, Failure):
            return Failure(start.kind, f"origin: {start.message}", self.name)
        end = self.geocoder.geocode(destination)
        if isinstance(end, Failure):
            return Failure(end.kind, f"destination: {end.message}", self.name)
        return start, end

    def _result(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        *,
        distance_meters: float | None,
        duration_seconds: int | None,
        provider_label: str,
        distance_text: str | None = None,
        duration_text: str | None = None,
        estimated: bool = False,
    ) -> RouteResult:
        if distance_meters is None or duration_seconds is None:
            raise ProviderError(self.name, "response is missing distance or duration")
        if distance_meters < 0 or duration_seconds < 0:
            raise ProviderError(self.name, "response has a negative distance or duration")
        return RouteResult(
            distance_text=distance_text or format_distance(distance_meters),
            distance_meters=float(distance_meters),
            duration_text=duration_text or format_duration(duration_seconds),
            duration_seconds=int(duration_seconds),
            estimated=estimated,
            provider_label=provider_label,
            resolved_origin=origin.formatted_address,
            resolved_destination=destination.formatted_address,
            map_link_url=build_maps_link(origin.formatted_address, destination.formatted_address),
            stage=self.name,
        )


class PreciseRouteStage(RouteStage):
    """Two-wheeler, traffic-aware routing from the Routes API."""

    name = "precise"

    def __init__(self, geocoder: GeocodingClient, client: GoogleMapsClient, travel_mode: str = "TWO_WHEELER") -> None:
        super().__init__(geocoder)
        self.client = client
        self.travel_mode = travel_mode

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResult:
        data = self.client.compute_routes(origin, destination, travel_mode=self.travel_mode)
        primary = data["routes"][0]
        return self._result(
            origin,
            destination,
            distance_meters=primary.get("distanceMeters"),
            duration_seconds=parse_duration_seconds(primary.get("duration")),
            provider_label=primary.get("description") or PRECISE_FALLBACK_LABEL,
        )


class DrivingDirectionsStage(RouteStage):
    """Car directions with live traffic, scaled down for a lighter vehicle."""

    name = "directions"

    def __init__(self, geocoder: GeocodingClient, client: GoogleMapsClient, speed_adjustment_factor: float = 0.95) -> None:
        super().__init__(geocoder)
        self.client = client
        self.speed_adjustment_factor = speed_adjustment_factor

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResult:
        data = self.client.directions(origin, destination)
        primary = data["routes"][0]
        leg = primary["legs"][0]
        traffic = leg.get("duration_in_traffic") or leg["duration"]
        return self._result(
            origin,
            destination,
            distance_meters=leg["distance"]["value"],
            duration_seconds=round(traffic["value"] * self.speed_adjustment_factor),
            provider_label=primary.get("summary") or DRIVING_FALLBACK_LABEL,
        )


class DistanceMatrixStage(RouteStage):
    """One-to-one distance matrix lookup with the same speed adjustment."""

    name = "matrix"

    def __init__(self, geocoder: GeocodingClient, client: GoogleMapsClient, speed_adjustment_factor: float = 0.95) -> None:
        super().__init__(geocoder)
        self.client = client
        self.speed_adjustment_factor = speed_adjustment_factor

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResult:
        data = self.client.distance_matrix(origin, destination)
        element = data["rows"][0]["elements"][0]
        if element.get("status") != "OK":
            raise ProviderError(self.name, f"element status {element.get('status')}")
        traffic = element.get("duration_in_traffic") or element["duration"]
        distance = element["distance"]
        # Text comes from the provider as-is; only the seconds carry the adjustment.
        return self._result(
            origin,
            destination,
            distance_meters=distance["value"],
            duration_seconds=round(traffic["value"] * self.speed_adjustment_factor),
            provider_label=MATRIX_LABEL,
            distance_text=distance.get("text"),
            duration_text=traffic.get("text"),
        )


class GreatCircleStage(RouteStage):
    """Last resort: straight-line distance scaled for road indirection at an assumed speed."""

    name = "estimate"

    def __init__(self, geocoder: GeocodingClient, estimator: GreatCircleEstimator) -> None:
        super().__init__(geocoder)
        self.estimator = estimator

    def route(self, origin: GeoPoint, destination: GeoPoint) -> RouteResult:
        distance_km, minutes = self.estimator.estimate(origin, destination)
        return self._result(
            origin,
            destination,
            distance_meters=distance_km * 1000,
            duration_seconds=minutes * 60,
            provider_label=ESTIMATED_LABEL,
            estimated=True,
        )


def build_default_stages(config: RoutingConfig, client: GoogleMapsClient | None = None) -> tuple[list[RouteStage], GreatCircleStage]:
    client = client or GoogleMapsClient(config)
    geocoder = GeocodingClient(client)
    stages: list[RouteStage] = [
        PreciseRouteStage(geocoder, client),
        DrivingDirectionsStage(geocoder, client, config.speed_adjustment_factor),
        DistanceMatrixStage(geocoder, client, config.speed_adjustment_factor),
    ]
    fallback = GreatCircleStage(
        geocoder,
        GreatCircleEstimator(config.road_indirection_factor, config.average_speed_kmh),
    )
    logger.debug(f"Built route chain stages: {[stage.name for stage in stages]} + {fallback.name}")
    return stages, fallback
