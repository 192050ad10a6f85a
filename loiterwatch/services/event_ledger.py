"""Correlation of loitering detections into durable, expiring events."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import RLock
import time
from typing import Callable, Iterable, Sequence
from uuid import uuid4

from loiterwatch.domain.tracking import (
    Aircraft,
    AircraftState,
    Intersection,
    LoiteringEvent,
    TrackPoint,
)

logger = logging.getLogger("loiterwatch.event_ledger")


@dataclass
class LedgerUpdate:
    """A reported detection and the event it landed in (detached copy)."""

    event: LoiteringEvent
    created: bool


def merge_tracks(
    newer: Sequence[TrackPoint], older: Sequence[TrackPoint], max_points: int
) -> list[TrackPoint]:
    """Union of two tracks, newest first, unique by timestamp.

    When both contain a timestamp the sample from ``newer`` wins. The oldest
    end is trimmed to ``max_points``.
    """

    by_timestamp: dict[float, TrackPoint] = {}
    for point in older:
        by_timestamp[point.timestamp] = point
    for point in newer:
        by_timestamp[point.timestamp] = point
    merged = sorted(by_timestamp.values(), key=lambda p: p.timestamp, reverse=True)
    return merged[:max_points]


class EventLedger:
    """Owns loitering events keyed by id, plus the latest event per ICAO.

    A detection for an aircraft whose latest event was updated within
    ``inactivity_window_s`` continues that event; anything later opens a new
    one. Events older than ``retention_s`` are removed by ``expire`` whether or
    not the aircraft is still tracked.
    """

    def __init__(
        self,
        *,
        inactivity_window_s: float = 10 * 60,
        retention_s: float = 7 * 24 * 3600,
        max_track_points: int = 500,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self.inactivity_window_s = inactivity_window_s
        self.retention_s = retention_s
        self.max_track_points = max_track_points
        self._clock = clock
        self._id_factory = id_factory
        self._lock = RLock()
        self._events: dict[str, LoiteringEvent] = {}
        self._latest_by_icao: dict[str, str] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def report(
        self, aircraft: Aircraft, intersections: Sequence[Intersection]
    ) -> LedgerUpdate | None:
        """Record a loitering detection. Returns None when there is nothing to record."""

        if not aircraft.is_loitering or not intersections or not aircraft.track:
            return None

        now_ms = self._now_ms()
        newest = aircraft.track[0]
        with self._lock:
            current = self._current_event(aircraft.icao, now_ms)
            if current is not None:
                current.last_updated = now_ms
                current.callsign = aircraft.callsign or current.callsign
                current.intersection_points = list(intersections)
                current.track = merge_tracks(
                    aircraft.track, current.track, self.max_track_points
                )
                current.aircraft_state = AircraftState.from_point(newest)
                event, created = current, False
            else:
                event = LoiteringEvent(
                    id=self._id_factory(),
                    icao=aircraft.icao,
                    callsign=aircraft.callsign,
                    first_detected=now_ms,
                    last_updated=now_ms,
                    intersection_points=list(intersections),
                    aircraft_state=AircraftState.from_point(newest),
                    track=merge_tracks(aircraft.track, (), self.max_track_points),
                )
                created = True
            self._upsert(event)
            update = LedgerUpdate(event=event.snapshot(), created=created)

        if created:
            logger.info(
                "New loitering event %s for %s (%s)",
                update.event.id,
                aircraft.icao,
                aircraft.callsign or "no callsign",
            )
        return update

    def _current_event(self, icao: str, now_ms: int) -> LoiteringEvent | None:
        event_id = self._latest_by_icao.get(icao)
        if event_id is None:
            return None
        event = self._events.get(event_id)
        if event is None:
            return None
        if now_ms - event.last_updated > self.inactivity_window_s * 1000:
            return None
        return event

    def _upsert(self, event: LoiteringEvent) -> None:
        self._events[event.id] = event
        latest_id = self._latest_by_icao.get(event.icao)
        latest = self._events.get(latest_id) if latest_id else None
        if latest is None or latest.last_updated <= event.last_updated:
            self._latest_by_icao[event.icao] = event.id

    def expire(self) -> list[str]:
        """Delete events whose last update is older than the retention horizon."""

        cutoff_ms = self._now_ms() - int(self.retention_s * 1000)
        with self._lock:
            expired = [
                event_id
                for event_id, event in self._events.items()
                if event.last_updated < cutoff_ms
            ]
            for event_id in expired:
                event = self._events.pop(event_id)
                if self._latest_by_icao.get(event.icao) == event_id:
                    del self._latest_by_icao[event.icao]
        if expired:
            logger.info("Expired %s loitering events", len(expired))
        return expired

    def list_events(self) -> list[LoiteringEvent]:
        """All events, most recently updated first."""

        with self._lock:
            events = [event.snapshot() for event in self._events.values()]
        return sorted(events, key=lambda e: e.last_updated, reverse=True)

    def get_event(self, event_id: str) -> LoiteringEvent | None:
        with self._lock:
            event = self._events.get(event_id)
            return event.snapshot() if event else None

    def get_latest_event(self, icao: str) -> LoiteringEvent | None:
        with self._lock:
            event_id = self._latest_by_icao.get(icao)
            event = self._events.get(event_id) if event_id else None
            return event.snapshot() if event else None

    def restore(self, events: Iterable[LoiteringEvent]) -> int:
        count = 0
        with self._lock:
            for event in events:
                self._upsert(event.snapshot())
                count += 1
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


__all__ = ["EventLedger", "LedgerUpdate", "merge_tracks"]
