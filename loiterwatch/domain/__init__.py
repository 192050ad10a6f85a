"""Domain types for LoiterWatch."""

from .areas import CENTRAL_MED_BOUNDS, CENTRAL_MED_POLYGON
from .tracking import (
    Aircraft,
    AircraftState,
    BoundingBox,
    Intersection,
    LoiteringDiagnostic,
    LoiteringEvent,
    LoiteringThresholds,
    MonitoringArea,
    Position,
    Range,
    Segment,
    Thresholds,
    TrackPoint,
)

__all__ = [
    "Aircraft",
    "AircraftState",
    "BoundingBox",
    "CENTRAL_MED_BOUNDS",
    "CENTRAL_MED_POLYGON",
    "Intersection",
    "LoiteringDiagnostic",
    "LoiteringEvent",
    "LoiteringThresholds",
    "MonitoringArea",
    "Position",
    "Range",
    "Segment",
    "Thresholds",
    "TrackPoint",
]
