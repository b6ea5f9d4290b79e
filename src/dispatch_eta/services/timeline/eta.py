"""Absolute delivery estimates from a duration and a base time."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .durations import parse_minutes

COULD_NOT_CALCULATE = "Could not calculate"
NEED_VALID_ADDRESS = "Need valid address"

_SENTINELS = {COULD_NOT_CALCULATE.lower(), NEED_VALID_ADDRESS.lower()}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def estimated_delivery_time(
    duration_text: str | None,
    base_time: datetime | None = None,
    *,
    now: datetime | None = None,
) -> datetime | None:
    """Add the parsed duration to ``base_time`` (or now).

    Returns None for empty text, for the chain's placeholder strings, and for text
    that does not parse to a positive number of minutes.
    """
    if not duration_text or not duration_text.strip():
        return None
    if duration_text.strip().lower() in _SENTINELS:
        return None
    minutes = parse_minutes(duration_text)
    if minutes <= 0:
        return None
    base = base_time or now or utc_now()
    return base + timedelta(minutes=minutes)


def estimated_delivery_time_from_seconds(duration_seconds: int | None, base_time: datetime | None = None) -> datetime | None:
    if duration_seconds is None or duration_seconds < 0:
        return None
    return (base_time or utc_now()) + timedelta(seconds=duration_seconds)
