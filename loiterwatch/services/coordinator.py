"""Scan loop tying the provider to the trajectory store and event ledger."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import time
from typing import Callable, Optional

from loiterwatch.domain.tracking import BoundingBox, LoiteringEvent, Position, TrackPoint
from loiterwatch.ingestors.base import ProviderError, ScanAircraft, ScannerProvider
from loiterwatch.notifications.telegram import Notifier
from loiterwatch.services.classifier import CoastOracle
from loiterwatch.services.event_ledger import EventLedger
from loiterwatch.services.geo import area_contains
from loiterwatch.services.persistence import SnapshotStore
from loiterwatch.services.trajectory_store import TrajectoryStore

logger = logging.getLogger("loiterwatch.coordinator")


@dataclass
class ScanSummary:
    """Counters for one completed scan cycle."""

    reports: int = 0
    ingested: int = 0
    dropped: int = 0
    loitering: int = 0
    new_events: list[LoiteringEvent] = field(default_factory=list)
    error: Optional[str] = None


class IngestionCoordinator:
    """Runs scan cycles: fetch, ingest, correlate, prune, notify.

    The coordinator is the only writer of the trajectory store and the event
    ledger. Network calls and notifications happen outside the stores' locks.
    A cycle that is still running when another is requested is not repeated;
    the second request is skipped.
    """

    def __init__(
        self,
        provider: ScannerProvider,
        store: TrajectoryStore,
        ledger: EventLedger,
        *,
        bounds: BoundingBox | None = None,
        coast_oracle: CoastOracle | None = None,
        notifier: Notifier | None = None,
        snapshot_store: SnapshotStore | None = None,
        scan_interval_s: float = 15,
        expiry_interval_s: float = 3600,
        snapshot_interval_s: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.provider = provider
        self.store = store
        self.ledger = ledger
        self.bounds = bounds or store.area.bounds
        self.coast_oracle = coast_oracle
        self.notifier = notifier
        self.snapshot_store = snapshot_store
        self.scan_interval_s = scan_interval_s
        self.expiry_interval_s = expiry_interval_s
        self.snapshot_interval_s = snapshot_interval_s
        self._clock = clock
        self._scan_lock = asyncio.Lock()
        self._last_expiry_at: float | None = None
        self._last_snapshot_at: float | None = None

    @property
    def scanning(self) -> bool:
        return self._scan_lock.locked()

    async def scan_once(self) -> ScanSummary | None:
        """Run one cycle, or return None if a cycle is already in progress."""

        if self._scan_lock.locked():
            logger.debug("Previous scan still running; skipping this cycle")
            return None
        async with self._scan_lock:
            return await self._scan()

    async def _scan(self) -> ScanSummary:
        try:
            result = await self.provider.scan(self.bounds)
        except ProviderError as exc:
            logger.warning("Scan failed, will retry next cycle: %s", exc)
            return ScanSummary(error=str(exc))

        summary = ScanSummary(reports=len(result.aircraft))
        for report in result.aircraft:
            point = self._to_point(report)
            if point is None:
                summary.dropped += 1
                continue

            outcome = self.store.ingest(report.icao, point, report.callsign)
            if not outcome.accepted:
                continue
            summary.ingested += 1

            aircraft = outcome.aircraft
            if not (aircraft.is_loitering and outcome.intersections):
                continue
            summary.loitering += 1
            update = self.ledger.report(aircraft, outcome.intersections)
            if update is not None and update.created:
                summary.new_events.append(update.event)

        self.store.cleanup_inactive()
        self._maybe_expire()
        self._maybe_snapshot()

        for event in summary.new_events:
            await self._notify(event)

        logger.debug(
            "Scan complete: %s reports, %s ingested, %s dropped, %s loitering, %s new events",
            summary.reports,
            summary.ingested,
            summary.dropped,
            summary.loitering,
            len(summary.new_events),
        )
        return summary

    def _to_point(self, report: ScanAircraft) -> TrackPoint | None:
        if not report.icao or report.latitude is None or report.longitude is None:
            return None

        distance_to_coast = report.distance_to_coast
        if distance_to_coast is None and self.coast_oracle is not None:
            position = Position(report.latitude, report.longitude)
            # Outside the area the sea check is never reached.
            if area_contains(self.store.area, position):
                distance_to_coast = self.coast_oracle.min_distance_to_coastline(position)

        return TrackPoint(
            latitude=report.latitude,
            longitude=report.longitude,
            timestamp=report.timestamp,
            altitude=report.altitude,
            speed=report.speed,
            heading=report.heading,
            vertical_rate=report.vertical_rate,
            distance_to_coast=distance_to_coast,
        )

    async def _notify(self, event: LoiteringEvent) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.notify_new_event(event)
        except Exception as exc:  # pragma: no cover - defensive logging
            logger.warning("Notifier failed for event %s: %s", event.id, exc)

    def _maybe_expire(self) -> None:
        now = self._clock()
        if (
            self._last_expiry_at is not None
            and now - self._last_expiry_at < self.expiry_interval_s
        ):
            return
        self._last_expiry_at = now
        self.ledger.expire()

    def _maybe_snapshot(self) -> None:
        if self.snapshot_store is None:
            return
        now = self._clock()
        if (
            self._last_snapshot_at is not None
            and now - self._last_snapshot_at < self.snapshot_interval_s
        ):
            return
        self._last_snapshot_at = now
        self.save_snapshot()

    def save_snapshot(self) -> bool:
        """Write current aircraft and events to the snapshot store."""

        if self.snapshot_store is None:
            return False
        aircraft_ok = self.snapshot_store.save_aircraft_snapshot(self.store.list_aircraft())
        events_ok = self.snapshot_store.save_event_snapshot(self.ledger.list_events())
        return aircraft_ok and events_ok

    def load_snapshot(self) -> tuple[int, int]:
        """Repopulate the store and ledger from the snapshot store."""

        if self.snapshot_store is None:
            return 0, 0
        aircraft = self.store.restore(self.snapshot_store.load_aircraft())
        events = self.ledger.restore(self.snapshot_store.load_events())
        logger.info("Restored %s aircraft and %s events from snapshot", aircraft, events)
        return aircraft, events

    async def run(self) -> None:
        """Scan on a fixed interval until cancelled."""

        logger.info("Scanner started, interval %.0fs", self.scan_interval_s)
        while True:
            try:
                await self.scan_once()
            except asyncio.CancelledError:
                logger.info("Scanner cancelled")
                raise
            except Exception:  # pragma: no cover - defensive logging
                logger.exception("Unexpected error during scan cycle")
            await asyncio.sleep(self.scan_interval_s)


__all__ = ["IngestionCoordinator", "ScanSummary"]
