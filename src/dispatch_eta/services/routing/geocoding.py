"""Forward geocoding with failures reported as values."""

from __future__ import annotations

import logging

from ...exceptions import GeocodeNotFound, ProviderError
from ...models.domain import Failure, FailureKind, GeoPoint
from .google_client import GoogleMapsClient

logger = logging.getLogger(__name__)


class GeocodingClient:
    """Resolves free text to a GeoPoint. Never raises for a lookup that simply found nothing."""

    def __init__(self, client: GoogleMapsClient) -> None:
        self.client = client

    def geocode(self, address: str) -> GeoPoint | Failure:
        if not address or not address.strip():
            return Failure(FailureKind.GEOCODE_NOT_FOUND, "empty address")
        try:
            point = self.client.geocode(address)
        except GeocodeNotFound as exc:
            logger.warning(f"Geocoding found no result for {address!r}: {exc}")
            return Failure(FailureKind.GEOCODE_NOT_FOUND, str(exc))
        except ProviderError as exc:
            logger.warning(f"Geocoding request failed for {address!r}: {exc}")
            return Failure(FailureKind.GEOCODE_NOT_FOUND, str(exc))
        logger.debug(f"Geocoded {address!r} to {point.lat},{point.lng} ({point.formatted_address})")
        return point
