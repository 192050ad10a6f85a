"""Request dependencies resolving the services created at startup."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

from loiterwatch.domain.tracking import MonitoringArea, Thresholds
from loiterwatch.services.event_ledger import EventLedger
from loiterwatch.services.trajectory_store import TrajectoryStore


def _state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return value


def get_trajectory_store(request: Request) -> TrajectoryStore:
    return _state(request, "trajectory_store")


def get_event_ledger(request: Request) -> EventLedger:
    return _state(request, "event_ledger")


def get_monitoring_area(request: Request) -> MonitoringArea:
    return get_trajectory_store(request).area


def get_thresholds(request: Request) -> Thresholds:
    return get_trajectory_store(request).thresholds
