"""Self-intersection based loitering detection."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional, Sequence

from loiterwatch.domain.tracking import (
    Intersection,
    LoiteringDiagnostic,
    MonitoringArea,
    Segment,
    Thresholds,
    TrackPoint,
)
from loiterwatch.services.classifier import classify
from loiterwatch.services.geo import segments_intersect

logger = logging.getLogger("loiterwatch.detector")

MIN_TRACK_POINTS = 4


@dataclass
class DetectionResult:
    """All qualifying crossings found on one track."""

    intersections: list[Intersection] = field(default_factory=list)
    diagnostic: Optional[LoiteringDiagnostic] = None

    @property
    def is_loitering(self) -> bool:
        return bool(self.intersections)


def build_segments(track: Sequence[TrackPoint]) -> list[Segment]:
    """Consecutive legs of a newest-first track; leg ``i`` starts at ``track[i]``."""

    return [Segment(start=track[i], end=track[i + 1]) for i in range(len(track) - 1)]


class LoiteringDetector:
    """Find crossings of non-adjacent legs whose endpoints are all monitored."""

    def __init__(self, area: MonitoringArea, thresholds: Thresholds) -> None:
        self.area = area
        self.thresholds = thresholds

    def detect(self, track: Sequence[TrackPoint]) -> DetectionResult:
        result = DetectionResult()
        if len(track) < MIN_TRACK_POINTS:
            return result

        segments = build_segments(track)
        # Cache per-sample eligibility; each sample appears in up to two legs.
        eligible: dict[int, bool] = {}

        def _monitored(index: int) -> bool:
            if index not in eligible:
                eligible[index] = classify(
                    track[index], self.area, self.thresholds
                ).monitored
            return eligible[index]

        for i in range(len(segments) - 2):
            for j in range(i + 2, len(segments)):
                if not segments_intersect(segments[i], segments[j]):
                    continue
                # Legs i and j span samples i, i+1, j, j+1.
                if not all(_monitored(k) for k in (i, i + 1, j, j + 1)):
                    continue
                pair = (segments[i], segments[j])
                result.intersections.append(
                    Intersection(
                        segments=pair,
                        timestamp=max(
                            segments[i].newest_timestamp, segments[j].newest_timestamp
                        ),
                    )
                )
                if result.diagnostic is None:
                    result.diagnostic = LoiteringDiagnostic(
                        reason="Path crosses itself", segments=pair
                    )

        if result.intersections:
            logger.debug(
                "Track of %s points has %s qualifying crossings",
                len(track),
                len(result.intersections),
            )
        return result


__all__ = ["DetectionResult", "LoiteringDetector", "MIN_TRACK_POINTS", "build_segments"]
