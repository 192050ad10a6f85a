"""Pydantic models for LoiterWatch."""

from .monitoring import (
    AircraftListResponse,
    BoundsModel,
    MapConfigResponse,
    MonitoringAreaModel,
    ThresholdsModel,
)
from .tracking import (
    AircraftModel,
    AircraftStateModel,
    IntersectionModel,
    LoiteringDiagnosticModel,
    LoiteringEventModel,
    PositionModel,
    SegmentModel,
    TrackPointModel,
)

__all__ = [
    "AircraftListResponse",
    "AircraftModel",
    "AircraftStateModel",
    "BoundsModel",
    "IntersectionModel",
    "LoiteringDiagnosticModel",
    "LoiteringEventModel",
    "MapConfigResponse",
    "MonitoringAreaModel",
    "PositionModel",
    "SegmentModel",
    "ThresholdsModel",
    "TrackPointModel",
]
