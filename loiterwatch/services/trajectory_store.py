"""Per-aircraft track history and monitoring/loitering state."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from threading import RLock
import time
from typing import Callable, Iterable, Optional

from loiterwatch.domain.tracking import (
    Aircraft,
    Intersection,
    MonitoringArea,
    Thresholds,
    TrackPoint,
)
from loiterwatch.services.classifier import classify
from loiterwatch.services.loitering_detector import LoiteringDetector

logger = logging.getLogger("loiterwatch.trajectory_store")


@dataclass
class IngestOutcome:
    """Result of merging one sample into the store.

    ``aircraft`` is a detached copy. ``accepted`` is False for duplicate
    samples, in which case nothing was re-evaluated.
    """

    aircraft: Aircraft
    accepted: bool
    intersections: list[Intersection] = field(default_factory=list)


class TrajectoryStore:
    """Owns every tracked aircraft, keyed by ICAO.

    Tracks are newest first and bounded by age: after each ingest, samples
    older than ``max_track_age_s`` relative to the newest sample are dropped.
    All access goes through one lock so readers never see a half-updated
    record; callers receive copies.
    """

    def __init__(
        self,
        area: MonitoringArea,
        thresholds: Thresholds,
        *,
        detector: LoiteringDetector | None = None,
        max_track_age_s: float = 20 * 60,
        out_of_range_grace_s: float = 30,
        inactive_after_s: float = 15 * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.area = area
        self.thresholds = thresholds
        self.detector = detector or LoiteringDetector(area, thresholds)
        self.max_track_age_s = max_track_age_s
        self.out_of_range_grace_s = out_of_range_grace_s
        self.inactive_after_s = inactive_after_s
        self._clock = clock
        self._lock = RLock()
        self._aircraft: dict[str, Aircraft] = {}

    def ingest(
        self, icao: str, point: TrackPoint, callsign: Optional[str] = None
    ) -> IngestOutcome:
        now = self._clock()
        with self._lock:
            record = self._aircraft.get(icao)
            if record is None:
                record = Aircraft(
                    icao=icao, callsign=callsign, track=[point], last_seen=now
                )
                self._aircraft[icao] = record
            else:
                if callsign:
                    record.callsign = callsign
                record.last_seen = now
                if not self._merge_point(record, point):
                    return IngestOutcome(aircraft=record.snapshot(), accepted=False)

            self._apply_retention(record)
            intersections = self._evaluate(record)
            return IngestOutcome(
                aircraft=record.snapshot(), accepted=True, intersections=intersections
            )

    def _merge_point(self, record: Aircraft, point: TrackPoint) -> bool:
        newest = record.track[0]
        if point.same_state_as(newest):
            return False
        if point.timestamp > newest.timestamp:
            record.track.insert(0, point)
            return True

        # Late sample: slot it in by timestamp so the track stays newest first.
        for index, existing in enumerate(record.track):
            if existing.timestamp == point.timestamp:
                return False
            if existing.timestamp < point.timestamp:
                record.track.insert(index, point)
                return True
        record.track.append(point)
        return True

    def _apply_retention(self, record: Aircraft) -> None:
        cutoff = record.track[0].timestamp - self.max_track_age_s
        while len(record.track) > 1 and record.track[-1].timestamp < cutoff:
            record.track.pop()

    def _evaluate(self, record: Aircraft) -> list[Intersection]:
        newest = record.latest
        verdict = classify(newest, self.area, self.thresholds)
        record.is_monitored = verdict.monitored
        record.not_monitored_reason = verdict.reason

        if not verdict.monitored:
            if record.out_of_range_since is None:
                record.out_of_range_since = newest.timestamp
            if newest.timestamp - record.out_of_range_since > self.out_of_range_grace_s:
                record.is_loitering = False
                record.loitering_debug = None
                return []
        else:
            record.out_of_range_since = None

        detection = self.detector.detect(record.track)
        if detection.is_loitering and not record.is_loitering:
            logger.info(
                "Aircraft %s (%s) is loitering: %s crossings",
                record.icao,
                record.callsign or "no callsign",
                len(detection.intersections),
            )
        record.is_loitering = detection.is_loitering
        record.loitering_debug = detection.diagnostic
        return list(detection.intersections)

    def cleanup_inactive(self) -> list[str]:
        """Drop aircraft whose newest sample is older than the inactivity limit."""

        threshold = self._clock() - self.inactive_after_s
        with self._lock:
            stale = [
                icao
                for icao, record in self._aircraft.items()
                if record.latest.timestamp < threshold
            ]
            for icao in stale:
                del self._aircraft[icao]
        if stale:
            logger.debug("Removed %s inactive aircraft", len(stale))
        return stale

    def get(self, icao: str) -> Aircraft | None:
        with self._lock:
            record = self._aircraft.get(icao)
            return record.snapshot() if record else None

    def list_aircraft(self) -> list[Aircraft]:
        with self._lock:
            return [record.snapshot() for record in self._aircraft.values()]

    def restore(self, aircraft: Iterable[Aircraft]) -> int:
        """Load previously persisted aircraft, skipping records with no track."""

        count = 0
        with self._lock:
            for record in aircraft:
                if not record.track:
                    continue
                self._aircraft[record.icao] = record.snapshot()
                count += 1
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._aircraft)


__all__ = ["IngestOutcome", "TrajectoryStore"]
