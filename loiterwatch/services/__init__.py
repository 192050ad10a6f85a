"""Detection core and the services around it."""

from .classifier import Classification, CoastOracle, classify
from .event_ledger import EventLedger, LedgerUpdate, merge_tracks
from .geo import (
    area_contains,
    bounds_contains,
    distance_km,
    polygon_contains,
    segments_intersect,
)
from .loitering_detector import DetectionResult, LoiteringDetector
from .trajectory_store import IngestOutcome, TrajectoryStore

__all__ = [
    "Classification",
    "CoastOracle",
    "DetectionResult",
    "EventLedger",
    "IngestOutcome",
    "LedgerUpdate",
    "LoiteringDetector",
    "TrajectoryStore",
    "area_contains",
    "bounds_contains",
    "classify",
    "distance_km",
    "merge_tracks",
    "polygon_contains",
    "segments_intersect",
]
