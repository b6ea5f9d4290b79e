"""Base timestamps for orders assigned to a driver who already has work queued."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from ...config import TimelineConfig
from ...models.domain import DriverOrderRef, TimelineAnchor
from .eta import utc_now

logger = logging.getLogger(__name__)


class LatestOrderReader(Protocol):
    def latest_for_driver(self, driver_id: str) -> Optional[DriverOrderRef]:
        """Return the driver's most recently created order, if any."""


class DeliveryTimelineEstimator:
    """Anchors a new order after the driver's previous one.

    The candidate base is the previous order's completion time, else its estimated
    delivery time, else now. A candidate older than the past-guard tolerance is
    replaced by now; a candidate taken from a real prior timestamp gets the
    sequencing buffer added.

    The anchor is only monotonic per driver if the caller serializes
    anchor-then-insert for that driver (see ``orders.locks``).
    """

    def __init__(
        self,
        orders: LatestOrderReader,
        config: TimelineConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.orders = orders
        self.config = config or TimelineConfig()
        self.clock = clock

    @property
    def past_guard(self) -> timedelta:
        return timedelta(minutes=self.config.past_guard_minutes)

    @property
    def sequencing_buffer(self) -> timedelta:
        return timedelta(seconds=self.config.sequencing_buffer_seconds)

    def anchor_for(self, driver_id: str | None) -> TimelineAnchor:
        now = self.clock()
        if not driver_id:
            return TimelineAnchor(base_time=now, was_adjusted_from_past=False)

        last_order = self.orders.latest_for_driver(driver_id)
        if last_order is None:
            return TimelineAnchor(base_time=now, was_adjusted_from_past=False)
        return self.anchor_after(last_order, now)

    def anchor_after(self, last_order: DriverOrderRef, now: datetime) -> TimelineAnchor:
        candidate = last_order.completion_time or last_order.estimated_delivery_time or now

        if candidate < now - self.past_guard:
            logger.info(
                f"Discarding stale anchor {candidate.isoformat()} "
                f"(more than {self.config.past_guard_minutes:g} min before now)"
            )
            return TimelineAnchor(base_time=now, was_adjusted_from_past=True)

        if candidate != now:
            candidate = candidate + self.sequencing_buffer
        return TimelineAnchor(base_time=candidate, was_adjusted_from_past=False)
