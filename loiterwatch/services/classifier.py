"""Monitoring eligibility rules for a single position sample."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from loiterwatch.domain.tracking import MonitoringArea, Position, Thresholds, TrackPoint
from loiterwatch.services.geo import area_contains


class CoastOracle(Protocol):
    """Distance from a position to the nearest coastline, in kilometres."""

    def min_distance_to_coastline(self, position: Position) -> Optional[float]:
        """Return ``None`` when the distance cannot be determined."""


@dataclass(frozen=True)
class Classification:
    """Outcome of the monitoring rules for one sample."""

    monitored: bool
    reason: Optional[str] = None


MONITORED = Classification(monitored=True)


def classify(
    point: TrackPoint,
    area: MonitoringArea,
    thresholds: Thresholds,
    coast_oracle: CoastOracle | None = None,
) -> Classification:
    """Check a sample against area, sea distance, speed and altitude, in that order.

    The first failing rule decides the reason. The sample's precomputed
    ``distance_to_coast`` is used when present; otherwise the oracle is asked.
    An unknown distance fails the sea check.
    """

    if not area_contains(area, point):
        return Classification(
            monitored=False,
            reason=f"Aircraft is outside the {area.name} monitoring area.",
        )

    coast_distance = point.distance_to_coast
    if coast_distance is None and coast_oracle is not None:
        coast_distance = coast_oracle.min_distance_to_coastline(point)
    if coast_distance is None or coast_distance < thresholds.coast_min_distance_km:
        return Classification(
            monitored=False, reason="Aircraft is over land or too close to coast."
        )

    speed = thresholds.speed
    if point.speed < speed.min:
        return Classification(
            monitored=False,
            reason=(
                f"Aircraft speed ({point.speed:.1f} knots) is too slow "
                f"(minimum: {speed.min:g} knots)."
            ),
        )
    if point.speed > speed.max:
        return Classification(
            monitored=False,
            reason=(
                f"Aircraft speed ({point.speed:.1f} knots) is too fast "
                f"(maximum: {speed.max:g} knots)."
            ),
        )

    altitude = thresholds.altitude
    if point.altitude < altitude.min:
        return Classification(
            monitored=False,
            reason=(
                f"Aircraft altitude ({point.altitude:.1f} feet) is too low "
                f"(minimum: {altitude.min:g} feet)."
            ),
        )
    if point.altitude > altitude.max:
        return Classification(
            monitored=False,
            reason=(
                f"Aircraft altitude ({point.altitude:.1f} feet) is too high "
                f"(maximum: {altitude.max:g} feet)."
            ),
        )

    return MONITORED


__all__ = ["Classification", "CoastOracle", "MONITORED", "classify"]
