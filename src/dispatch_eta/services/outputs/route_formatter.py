"""Display formatting and serializers for route results."""

from __future__ import annotations

from urllib.parse import quote, urlencode

from ...models.domain import RouteQuery, RouteResult

MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"
TWO_WHEELER_WARNING = (
    "Routes for light vehicles are approximate. Actual two-wheeler travel time may differ."
)


def format_distance(distance_meters: float) -> str:
    return f"{distance_meters / 1000:.1f} km"


def format_duration(duration_seconds: float) -> str:
    """Format seconds as "N mins", switching to "H hr M mins" from one hour up."""
    minutes = int(round(duration_seconds / 60))
    if minutes >= 60:
        hours, remainder = divmod(minutes, 60)
        return f"{hours} hr {remainder} mins"
    return f"{minutes} mins"


def build_maps_link(resolved_origin: str, resolved_destination: str) -> str:
    # Deep links always request driving directions, even when the route came from
    # two-wheeler routing.
    params = {
        "api": "1",
        "origin": resolved_origin,
        "destination": resolved_destination,
        "travelmode": "driving",
    }
    return f"{MAPS_DIRECTIONS_URL}?{urlencode(params, quote_via=quote)}"


def route_result_to_leg(query: RouteQuery, result: RouteResult) -> dict:
    return {
        "origin": query.origin,
        "destination": query.destination,
        "resolved_start_address": result.resolved_origin,
        "resolved_end_address": result.resolved_destination,
        "distance": result.distance_text,
        "duration": result.duration_text,
        "duration_value": result.duration_seconds,
        "distance_value": result.distance_meters,
        "estimated": result.estimated,
        "via": result.provider_label,
    }


def route_result_to_json(query: RouteQuery, result: RouteResult, *, same_area: bool | None = None) -> dict:
    payload = {
        "success": True,
        "estimated": result.estimated,
        "via": result.provider_label,
        "resolved_start_address": result.resolved_origin,
        "resolved_end_address": result.resolved_destination,
        "two_wheeler_warning": TWO_WHEELER_WARNING,
        "google_maps_link": result.map_link_url,
        "legs": [route_result_to_leg(query, result)],
    }
    if same_area is not None:
        payload["same_area"] = same_area
    return payload
