"""Minute counts from free-text duration strings."""

from __future__ import annotations

import re

_LEADING_DURATION = re.compile(r"(\d+)\s*([a-z]*)", re.IGNORECASE)

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440


def parse_minutes(text: str | None) -> int:
    """Return the minutes in the first number+unit of ``text``, or 0 when nothing parses.

    Only the leading match is honoured, so "1 hour 30 mins" yields 60. A return of
    0 means "no estimate", never a zero-length trip.
    """
    if not text:
        return 0
    match = _LEADING_DURATION.search(text)
    if not match:
        return 0
    value = int(match.group(1))
    unit = match.group(2).lower()
    if unit.startswith("min"):
        return value
    if unit.startswith("hour") or unit in {"h", "hr", "hrs"}:
        return value * MINUTES_PER_HOUR
    if unit.startswith("day"):
        return value * MINUTES_PER_DAY
    return value
