"""Duration parsing, ETA arithmetic and per-driver timeline anchoring."""

from .anchor import DeliveryTimelineEstimator
from .durations import parse_minutes
from .eta import estimated_delivery_time, estimated_delivery_time_from_seconds

__all__ = [
    "DeliveryTimelineEstimator",
    "estimated_delivery_time",
    "estimated_delivery_time_from_seconds",
    "parse_minutes",
]
