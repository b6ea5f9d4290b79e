"""HTTP client for the Google Maps geocoding and routing services."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import RoutingConfig
from ...exceptions import GeocodeNotFound, ProviderError
from ...models.domain import GeoPoint

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
COMPUTE_ROUTES_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"
DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"

ROUTES_FIELD_MASK = ",".join(
    (
        "routes.duration",
        "routes.distanceMeters",
        "routes.polyline.encodedPolyline",
        "routes.description",
    )
)

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    """Thin wrapper over the Google endpoints used by the route chain.

    Every call is a single attempt bounded by the configured timeout. Transport
    failures, non-2xx responses and non-OK API statuses are raised as ProviderError
    so that the calling stage can fall through to the next one.
    """

    def __init__(self, config: RoutingConfig) -> None:
        self.config = config
        self.timeout = config.timeout_seconds

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.config.connect_timeout_seconds, self.timeout)),
        )

    def _request(self, provider: str, method: str, url: str, **kwargs: Any) -> dict:
        client = self._get_client()
        logger.debug(f"{provider}: {method} {url}")
        try:
            response = client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                provider,
                f"HTTP {exc.response.status_code} from {url}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TimeoutException as exc:
            raise ProviderError(provider, f"request to {url} timed out after {self.timeout:.1f}s") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(provider, f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(provider, f"invalid JSON from {url}") from exc
        finally:
            client.close()

    def geocode(self, address: str) -> GeoPoint:
        params = {
            "address": address,
            "key": self.config.api_key,
            "region": self.config.region,
        }
        if self.config.country:
            params["components"] = f"country:{self.config.country}"

        data = self._request("geocode", "GET", GEOCODE_URL, params=params)
        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            raise GeocodeNotFound(address, data.get("status"))

        first = results[0]
        location = first.get("geometry", {}).get("location", {})
        try:
            lat = float(location["lat"])
            lng = float(location["lng"])
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeNotFound(address, "MISSING_LOCATION") from exc
        return GeoPoint(lat=lat, lng=lng, formatted_address=first.get("formatted_address") or address)

    def compute_routes(self, origin: GeoPoint, destination: GeoPoint, travel_mode: str = "TWO_WHEELER") -> dict:
        """Vehicle-aware, traffic-aware routing with alternatives."""
        body = {
            "origin": _waypoint(origin),
            "destination": _waypoint(destination),
            "travelMode": travel_mode,
            "routingPreference": "TRAFFIC_AWARE",
            "computeAlternativeRoutes": True,
            "languageCode": "en-US",
            "units": "METRIC",
        }
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.config.api_key,
            "X-Goog-FieldMask": ROUTES_FIELD_MASK,
        }
        data = self._request("routes", "POST", COMPUTE_ROUTES_URL, json=body, headers=headers)
        if not data.get("routes"):
            raise ProviderError("routes", "no routes returned")
        return data

    def directions(self, origin: GeoPoint, destination: GeoPoint) -> dict:
        params = {
            "origin": origin.as_param(),
            "destination": destination.as_param(),
            "mode": "driving",
            "departure_time": "now",
            "traffic_model": "best_guess",
            "alternatives": "true",
            "key": self.config.api_key,
        }
        data = self._request("directions", "GET", DIRECTIONS_URL, params=params)
        if data.get("status") != "OK" or not data.get("routes"):
            raise ProviderError("directions", f"status {data.get('status')}: {data.get('error_message', 'no routes')}")
        return data

    def distance_matrix(self, origin: GeoPoint, destination: GeoPoint) -> dict:
        params = {
            "origins": origin.as_param(),
            "destinations": destination.as_param(),
            "mode": "driving",
            "departure_time": "now",
            "key": self.config.api_key,
        }
        data = self._request("distance_matrix", "GET", DISTANCE_MATRIX_URL, params=params)
        if data.get("status") != "OK":
            raise ProviderError(
                "distance_matrix", f"status {data.get('status')}: {data.get('error_message', 'unknown error')}"
            )
        return data


def _waypoint(point: GeoPoint) -> dict:
    return {"location": {"latLng": {"latitude": point.lat, "longitude": point.lng}}}


def parse_duration_seconds(value: Any) -> int | None:
    """Parse a Routes API duration such as "1234s" into whole seconds."""
    if value is None:
        return None
    text = str(value).strip()
    if text.endswith("s"):
        text = text[:-1]
    try:
        return int(round(float(text)))
    except (ValueError, OverflowError):
        # non-numeric, NaN or infinite
        return None
