"""Application configuration and settings management."""

from dataclasses import dataclass
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """Explicit configuration handed to the geocoder, each chain stage and the chain itself."""

    api_key: str
    region: str = "in"
    country: str = "IN"
    address_suffix: str = "India"
    speed_adjustment_factor: float = 0.95
    road_indirection_factor: float = 1.4
    average_speed_kmh: float = 30.0
    timeout_seconds: float = 8.0
    connect_timeout_seconds: float = 5.0

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "Google Maps API key is not configured. Set ETA_GOOGLE_MAPS_API_KEY."
            )
        if self.average_speed_kmh <= 0:
            raise ConfigurationError("average_speed_kmh must be positive.")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive.")


@dataclass(frozen=True, slots=True)
class TimelineConfig:
    past_guard_minutes: float = 5.0
    sequencing_buffer_seconds: float = 10.0


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ETA_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery ETA Service"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Level applied to the dispatch_eta logger.")

    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Credential for the geocoding, routes, directions and distance matrix APIs.",
    )
    geocoding_region: str = Field(default="in", description="Region bias passed to the geocoder.")
    geocoding_country: str = Field(default="IN", description="Country component filter for geocoding.")
    address_suffix: str = Field(default="India", description="Country name appended to normalized addresses.")
    speed_adjustment_factor: float = Field(default=0.95, gt=0.0, le=1.0)
    road_indirection_factor: float = Field(default=1.4, ge=1.0)
    average_speed_kmh: float = Field(default=30.0, gt=0.0)
    provider_timeout_seconds: float = Field(default=8.0, gt=0.0)
    provider_connect_timeout_seconds: float = Field(default=5.0, gt=0.0)

    past_guard_minutes: float = Field(default=5.0, ge=0.0)
    sequencing_buffer_seconds: float = Field(default=10.0, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=("http://localhost:3000", "http://127.0.0.1:3000"),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    orders_table: str = "orders"

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    def routing_config(self) -> RoutingConfig:
        """Build the routing configuration, raising ConfigurationError when credentials are missing."""
        return RoutingConfig(
            api_key=self.google_maps_api_key or "",
            region=self.geocoding_region,
            country=self.geocoding_country,
            address_suffix=self.address_suffix,
            speed_adjustment_factor=self.speed_adjustment_factor,
            road_indirection_factor=self.road_indirection_factor,
            average_speed_kmh=self.average_speed_kmh,
            timeout_seconds=self.provider_timeout_seconds,
            connect_timeout_seconds=self.provider_connect_timeout_seconds,
        )

    def timeline_config(self) -> TimelineConfig:
        return TimelineConfig(
            past_guard_minutes=self.past_guard_minutes,
            sequencing_buffer_seconds=self.sequencing_buffer_seconds,
        )


settings = Settings()
