"""Routing orchestration service."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from ...config import settings
from ...models.domain import RouteQuery, RouteResult
from ..addresses import shares_known_locality
from ..outputs.route_formatter import route_result_to_json
from .chain import RouteProviderChain
from .google_client import GoogleMapsClient
from .stages import build_default_stages

logger = logging.getLogger(__name__)


@lru_cache()
def get_route_chain() -> RouteProviderChain:
    """Build the process-wide chain. Raises ConfigurationError when credentials are missing."""
    config = settings.routing_config()
    stages, fallback = build_default_stages(config, GoogleMapsClient(config))
    return RouteProviderChain(stages, fallback, address_suffix=config.address_suffix)


def first_address(values: Any) -> str:
    """First entry of a list of addresses, or "" when the value is not a non-empty list of text."""
    if not isinstance(values, (list, tuple)) or not values:
        return ""
    first = values[0]
    if not isinstance(first, str):
        return ""
    return first.strip()


def resolve_route(origin: str, destination: str, chain: RouteProviderChain | None = None) -> RouteResult:
    chain = chain or get_route_chain()
    return chain.resolve(origin, destination)


def calculate_routes(origins: Any, destinations: Any) -> dict:
    """Resolve the first origin/destination pair and build the response payload."""
    origin = first_address(origins)
    destination = first_address(destinations)
    if not origin or not destination:
        raise ValueError("Invalid origins or destinations")

    same_area = shares_known_locality(origin, destination)
    logger.info(f"Calculating route {origin!r} -> {destination!r} (same area: {same_area})")

    result = resolve_route(origin, destination)
    return route_result_to_json(RouteQuery(origin, destination), result, same_area=same_area)
