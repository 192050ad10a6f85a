"""Core value types for aircraft tracking and loitering events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Position:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class TrackPoint(Position):
    """A single position sample with flight state.

    ``timestamp`` is seconds since epoch. ``distance_to_coast`` is filled by the
    coastline oracle at ingestion time and is ``None`` when unknown.
    """

    timestamp: float = 0.0
    altitude: float = 0.0
    speed: float = 0.0
    heading: float = 0.0
    vertical_rate: float = 0.0
    distance_to_coast: Optional[float] = None

    def same_state_as(self, other: "TrackPoint") -> bool:
        return (
            self.latitude == other.latitude
            and self.longitude == other.longitude
            and self.altitude == other.altitude
            and self.speed == other.speed
            and self.heading == other.heading
            and self.vertical_rate == other.vertical_rate
        )


@dataclass(frozen=True)
class Segment:
    """Straight track leg between two consecutive samples."""

    start: TrackPoint
    end: TrackPoint

    @property
    def newest_timestamp(self) -> float:
        return max(self.start.timestamp, self.end.timestamp)


@dataclass(frozen=True)
class Intersection:
    """Crossing of two non-adjacent track segments."""

    segments: tuple[Segment, Segment]
    timestamp: float


@dataclass(frozen=True)
class LoiteringDiagnostic:
    """Why an aircraft was flagged as loitering."""

    reason: str
    segments: tuple[Segment, Segment]


@dataclass
class Aircraft:
    """Tracked aircraft. ``track`` is ordered newest first and never empty."""

    icao: str
    callsign: Optional[str]
    track: list[TrackPoint]
    is_monitored: bool = False
    not_monitored_reason: Optional[str] = None
    is_loitering: bool = False
    loitering_debug: Optional[LoiteringDiagnostic] = None
    out_of_range_since: Optional[float] = None
    last_seen: Optional[float] = None

    @property
    def latest(self) -> TrackPoint:
        return self.track[0]

    def snapshot(self) -> "Aircraft":
        """Return a copy that shares no mutable state with this record."""

        return Aircraft(
            icao=self.icao,
            callsign=self.callsign,
            track=list(self.track),
            is_monitored=self.is_monitored,
            not_monitored_reason=self.not_monitored_reason,
            is_loitering=self.is_loitering,
            loitering_debug=self.loitering_debug,
            out_of_range_since=self.out_of_range_since,
            last_seen=self.last_seen,
        )


@dataclass(frozen=True)
class AircraftState:
    """Flight state captured on a loitering event at its last update."""

    altitude: float
    speed: float
    heading: float
    vertical_rate: float
    position: Position

    @classmethod
    def from_point(cls, point: TrackPoint) -> "AircraftState":
        return cls(
            altitude=point.altitude,
            speed=point.speed,
            heading=point.heading,
            vertical_rate=point.vertical_rate,
            position=Position(latitude=point.latitude, longitude=point.longitude),
        )


@dataclass
class LoiteringEvent:
    """Durable record of a loitering episode. Times are epoch milliseconds."""

    id: str
    icao: str
    callsign: Optional[str]
    first_detected: int
    last_updated: int
    intersection_points: list[Intersection]
    aircraft_state: AircraftState
    track: list[TrackPoint] = field(default_factory=list)

    def snapshot(self) -> "LoiteringEvent":
        return LoiteringEvent(
            id=self.id,
            icao=self.icao,
            callsign=self.callsign,
            first_detected=self.first_detected,
            last_updated=self.last_updated,
            intersection_points=list(self.intersection_points),
            aircraft_state=self.aircraft_state,
            track=list(self.track),
        )


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive latitude/longitude bounds."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


@dataclass(frozen=True)
class MonitoringArea:
    """Region of interest. ``polygon`` vertices are ``(lat, lon)`` pairs."""

    bounds: BoundingBox
    polygon: Optional[tuple[tuple[float, float], ...]] = None
    name: str = "monitoring"


@dataclass(frozen=True)
class Range:
    min: float
    max: float


@dataclass(frozen=True)
class LoiteringThresholds:
    # Used only by radius/dwell style detectors; kept for configuration parity.
    max_radius_km: float
    min_duration_s: float


@dataclass(frozen=True)
class Thresholds:
    """Monitoring envelope: altitude in feet, speed in knots, coast in km."""

    altitude: Range
    speed: Range
    coast_min_distance_km: float
    loitering: LoiteringThresholds


__all__ = [
    "Aircraft",
    "AircraftState",
    "BoundingBox",
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
