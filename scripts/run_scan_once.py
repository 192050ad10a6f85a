#!/usr/bin/env python
"""
Run one live scan against the configured provider and print what was seen.

Nothing is persisted and no notifications are sent.

Usage (from repo root):
    LOITERWATCH_PROVIDER=adsbfi python scripts/run_scan_once.py
"""

import asyncio
from datetime import datetime, timezone

from loiterwatch.config import build_monitoring_area, build_thresholds, settings
from loiterwatch.ingestors import CoastlineOracle, build_provider
from loiterwatch.services.coordinator import IngestionCoordinator
from loiterwatch.services.event_ledger import EventLedger
from loiterwatch.services.trajectory_store import TrajectoryStore


async def main() -> None:
    now = datetime.now(timezone.utc)
    area = build_monitoring_area(settings)
    store = TrajectoryStore(area, build_thresholds(settings))
    coordinator = IngestionCoordinator(
        build_provider(settings),
        store,
        EventLedger(),
        coast_oracle=CoastlineOracle.load(settings.coastline_path),
    )

    print(f"=== Live scan of {area.name} via {settings.provider} (UTC now: {now.isoformat()}) ===\n")

    summary = await coordinator.scan_once()
    if summary is None or summary.error:
        print(f"Scan failed: {summary.error if summary else 'already running'}")
        return

    print(
        f"{summary.reports} reports, {summary.ingested} ingested, "
        f"{summary.dropped} dropped, {summary.loitering} loitering\n"
    )

    aircraft = store.list_aircraft()
    monitored = [a for a in aircraft if a.is_monitored]
    print(f"Monitored: {len(monitored)} of {len(aircraft)}")
    for idx, a in enumerate(monitored[:10], start=1):
        p = a.latest
        print(
            f"{idx}. icao={a.icao!r}, callsign={a.callsign!r}, "
            f"lat={p.latitude:.5f}, lon={p.longitude:.5f}, "
            f"alt_ft={p.altitude:.0f}, gs_kt={p.speed:.0f}, coast_km={p.distance_to_coast}"
        )

    skipped = [a for a in aircraft if not a.is_monitored][:5]
    if skipped:
        print("\nSample of not monitored:")
        for a in skipped:
            print(f"- {a.icao}: {a.not_monitored_reason}")


if __name__ == "__main__":
    asyncio.run(main())
