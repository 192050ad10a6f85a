from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from loiterwatch.api import api_router
from loiterwatch.config import build_monitoring_area, build_thresholds, settings
from loiterwatch.ingestors import CoastlineOracle, build_provider
from loiterwatch.notifications import build_notifier
from loiterwatch.services.coordinator import IngestionCoordinator
from loiterwatch.services.event_ledger import EventLedger
from loiterwatch.services.persistence import build_snapshot_store
from loiterwatch.services.trajectory_store import TrajectoryStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("loiterwatch")


def build_coordinator() -> IngestionCoordinator:
    """Wire the stores and collaborators described by ``settings``."""

    area = build_monitoring_area(settings)
    thresholds = build_thresholds(settings)
    store = TrajectoryStore(
        area,
        thresholds,
        max_track_age_s=settings.max_track_age_seconds,
        out_of_range_grace_s=settings.out_of_range_grace_seconds,
        inactive_after_s=settings.inactive_aircraft_seconds,
    )
    ledger = EventLedger(
        inactivity_window_s=settings.event_inactivity_seconds,
        retention_s=settings.event_retention_days * 24 * 3600,
        max_track_points=settings.event_track_max_points,
    )
    return IngestionCoordinator(
        build_provider(settings),
        store,
        ledger,
        coast_oracle=CoastlineOracle.load(settings.coastline_path),
        notifier=build_notifier(settings),
        snapshot_store=build_snapshot_store(
            settings.snapshot_backend, settings.snapshot_dir
        ),
        scan_interval_s=settings.scan_interval_seconds,
        expiry_interval_s=settings.event_expiry_interval_seconds,
        snapshot_interval_s=settings.snapshot_interval_seconds,
    )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    coordinator = build_coordinator()
    coordinator.load_snapshot()
    app.state.coordinator = coordinator
    app.state.trajectory_store = coordinator.store
    app.state.event_ledger = coordinator.ledger

    if settings.scanner_enabled:
        app.state.scanner_task = asyncio.create_task(coordinator.run())
        logger.info("Scanner started using provider %s", settings.provider)
    else:
        logger.warning("Scanner disabled; serving restored state only")

    try:
        yield
    finally:
        task = getattr(app.state, "scanner_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        coordinator.save_snapshot()
        logger.info("Final snapshot written")


app = FastAPI(title="LoiterWatch", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "LoiterWatch is running"}
