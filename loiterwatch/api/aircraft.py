"""Read endpoints for tracked aircraft and the monitoring configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from loiterwatch.api.deps import get_monitoring_area, get_thresholds, get_trajectory_store
from loiterwatch.domain.tracking import MonitoringArea, Thresholds
from loiterwatch.models import (
    AircraftListResponse,
    AircraftModel,
    MapConfigResponse,
    MonitoringAreaModel,
    ThresholdsModel,
)
from loiterwatch.services.trajectory_store import TrajectoryStore

router = APIRouter(prefix="/api", tags=["aircraft"])


@router.get(
    "/aircraft",
    response_model=AircraftListResponse,
    summary="List tracked aircraft",
)
def list_aircraft(
    store: TrajectoryStore = Depends(get_trajectory_store),
    area: MonitoringArea = Depends(get_monitoring_area),
) -> AircraftListResponse:
    return AircraftListResponse(
        aircraft=[AircraftModel.from_domain(a) for a in store.list_aircraft()],
        monitoring_area=MonitoringAreaModel.from_domain(area),
    )


@router.get(
    "/map",
    response_model=MapConfigResponse,
    summary="Monitoring area and thresholds",
)
def map_config(
    area: MonitoringArea = Depends(get_monitoring_area),
    thresholds: Thresholds = Depends(get_thresholds),
) -> MapConfigResponse:
    """Everything a map client needs to draw the area and explain filtering."""

    return MapConfigResponse(
        monitoring_area=MonitoringAreaModel.from_domain(area),
        thresholds=ThresholdsModel.from_domain(thresholds),
    )
