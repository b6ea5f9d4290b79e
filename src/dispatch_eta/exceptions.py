"""Exceptions raised by the estimation core."""

from __future__ import annotations


class EstimationError(Exception):
    """Base class for route and ETA estimation errors."""


class ConfigurationError(EstimationError):
    """Required provider or store configuration is missing."""


class AddressInvalid(EstimationError):
    """Address text is too short or lacks any routable component."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Address is not routable: {address!r}")


class GeocodeNotFound(EstimationError):
    """Geocoder returned no usable result for an address."""

    def __init__(self, address: str, status: str | None = None):
        self.address = address
        self.status = status
        detail = f" (status {status})" if status else ""
        super().__init__(f"Could not geocode address {address!r}{detail}")


class ProviderError(EstimationError):
    """Routing or matrix provider returned an error, an empty result, or timed out."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {message}")


class RouteUnavailable(EstimationError):
    """Every chain stage failed, including the geometric estimate."""


class OrderStoreError(EstimationError):
    """Order store read or write failed."""
