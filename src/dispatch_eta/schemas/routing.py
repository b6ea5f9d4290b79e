"""Route calculation request/response schemas."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CalculateRoutesRequest(BaseModel):
    # Shape is checked by routing_service.first_address.
    origins: Optional[Any] = Field(default=None, description="List of addresses; only the first is used.")
    destinations: Optional[Any] = Field(default=None, description="List of addresses; only the first is used.")


class RouteLegModel(CamelModel):
    origin: str
    destination: str
    resolved_start_address: str
    resolved_end_address: str
    distance: str
    duration: str
    duration_value: int = Field(..., ge=0, description="Duration in seconds.")
    distance_value: float = Field(..., ge=0, description="Distance in meters.")
    estimated: bool
    via: str


class CalculateRoutesResponse(CamelModel):
    success: bool = True
    estimated: bool
    via: str
    resolved_start_address: str
    resolved_end_address: str
    two_wheeler_warning: str
    google_maps_link: str
    same_area: Optional[bool] = None
    legs: List[RouteLegModel]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
