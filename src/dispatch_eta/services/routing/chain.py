"""Ordered fallback across route providers."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ...exceptions import RouteUnavailable
from ...models.domain import Failure, FailureKind, RouteQuery, RouteResult
from ..addresses import is_routable, normalize_address
from .stages import GreatCircleStage, RouteStage

logger = logging.getLogger(__name__)


class RouteProviderChain:
    """Runs stages strictly in order and returns the first result.

    Live stages run only when both addresses pass the routability check. The
    geometric stage always runs last; if it cannot geocode the endpoints the chain
    raises RouteUnavailable carrying every stage's failure reason.
    """

    def __init__(
        self,
        stages: Sequence[RouteStage],
        fallback: GreatCircleStage,
        *,
        address_suffix: str = "India",
        validator: Callable[[str], bool] = is_routable,
    ) -> None:
        self.stages = list(stages)
        self.fallback = fallback
        self.address_suffix = address_suffix
        self.validator = validator

    def resolve(self, origin: str, destination: str) -> RouteResult:
        query = RouteQuery(origin=origin, destination=destination)
        start = normalize_address(query.origin, self.address_suffix)
        end = normalize_address(query.destination, self.address_suffix)

        failures: list[Failure] = []
        if self.validator(query.origin) and self.validator(query.destination):
            live_stages = self.stages
        else:
            failures.append(Failure(FailureKind.ADDRESS_INVALID, "address failed routability check", "validator"))
            logger.info(f"Skipping live routing for non-routable addresses {origin!r} -> {destination!r}")
            live_stages = []

        for stage in [*live_stages, self.fallback]:
            outcome = stage.run(start, end)
            if isinstance(outcome, RouteResult):
                logger.info(
                    f"Route resolved by {stage.name} stage: {outcome.distance_text}, {outcome.duration_text} "
                    f"(estimated={outcome.estimated})"
                )
                return outcome
            logger.warning(f"Route stage {stage.name} failed ({outcome.kind.value}): {outcome.message}")
            failures.append(outcome)

        reasons = "; ".join(f"{failure.stage}: {failure.message}" for failure in failures)
        raise RouteUnavailable(f"Could not calculate route. {reasons}")
