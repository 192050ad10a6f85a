"""Pydantic schemas for aircraft, tracks and loitering events.

These are the wire shapes for both the read API and the snapshot files; field
names are camelCase on the wire and snake_case in Python.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from loiterwatch.domain.tracking import (
    Aircraft,
    AircraftState,
    Intersection,
    LoiteringDiagnostic,
    LoiteringEvent,
    Position,
    Segment,
    TrackPoint,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class PositionModel(CamelModel):
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    @classmethod
    def from_domain(cls, position: Position) -> "PositionModel":
        return cls(latitude=position.latitude, longitude=position.longitude)

    def to_domain(self) -> Position:
        return Position(latitude=self.latitude, longitude=self.longitude)


class TrackPointModel(CamelModel):
    """One position sample."""

    latitude: float
    longitude: float
    timestamp: float = Field(..., description="Seconds since epoch")
    altitude: float = Field(default=0.0, description="Altitude in feet")
    speed: float = Field(default=0.0, description="Ground speed in knots")
    heading: float = Field(default=0.0, description="Track heading in degrees")
    vertical_rate: float = Field(default=0.0, description="Feet per minute")
    distance_to_coast: Optional[float] = Field(
        default=None, description="Distance to the nearest coastline in km"
    )

    @classmethod
    def from_domain(cls, point: TrackPoint) -> "TrackPointModel":
        return cls(
            latitude=point.latitude,
            longitude=point.longitude,
            timestamp=point.timestamp,
            altitude=point.altitude,
            speed=point.speed,
            heading=point.heading,
            vertical_rate=point.vertical_rate,
            distance_to_coast=point.distance_to_coast,
        )

    def to_domain(self) -> TrackPoint:
        return TrackPoint(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=self.timestamp,
            altitude=self.altitude,
            speed=self.speed,
            heading=self.heading,
            vertical_rate=self.vertical_rate,
            distance_to_coast=self.distance_to_coast,
        )


class SegmentModel(CamelModel):
    start: TrackPointModel
    end: TrackPointModel

    @classmethod
    def from_domain(cls, segment: Segment) -> "SegmentModel":
        return cls(
            start=TrackPointModel.from_domain(segment.start),
            end=TrackPointModel.from_domain(segment.end),
        )

    def to_domain(self) -> Segment:
        return Segment(start=self.start.to_domain(), end=self.end.to_domain())


def _segment_pair(models: list[SegmentModel]) -> tuple[Segment, Segment]:
    first, second = models
    return first.to_domain(), second.to_domain()


class IntersectionModel(CamelModel):
    segments: list[SegmentModel] = Field(..., min_length=2, max_length=2)
    timestamp: float

    @classmethod
    def from_domain(cls, intersection: Intersection) -> "IntersectionModel":
        return cls(
            segments=[SegmentModel.from_domain(s) for s in intersection.segments],
            timestamp=intersection.timestamp,
        )

    def to_domain(self) -> Intersection:
        return Intersection(
            segments=_segment_pair(self.segments), timestamp=self.timestamp
        )


class LoiteringDiagnosticModel(CamelModel):
    reason: str
    segments: list[SegmentModel] = Field(..., min_length=2, max_length=2)

    @classmethod
    def from_domain(cls, diagnostic: LoiteringDiagnostic) -> "LoiteringDiagnosticModel":
        return cls(
            reason=diagnostic.reason,
            segments=[SegmentModel.from_domain(s) for s in diagnostic.segments],
        )

    def to_domain(self) -> LoiteringDiagnostic:
        return LoiteringDiagnostic(
            reason=self.reason, segments=_segment_pair(self.segments)
        )


class AircraftModel(CamelModel):
    """Tracked aircraft with its newest-first track."""

    icao: str
    callsign: Optional[str] = None
    is_monitored: bool = False
    not_monitored_reason: Optional[str] = None
    is_loitering: bool = False
    loitering_debug: Optional[LoiteringDiagnosticModel] = None
    out_of_range_since: Optional[float] = None
    last_seen: Optional[float] = None
    track: list[TrackPointModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, aircraft: Aircraft) -> "AircraftModel":
        return cls(
            icao=aircraft.icao,
            callsign=aircraft.callsign,
            is_monitored=aircraft.is_monitored,
            not_monitored_reason=aircraft.not_monitored_reason,
            is_loitering=aircraft.is_loitering,
            loitering_debug=(
                LoiteringDiagnosticModel.from_domain(aircraft.loitering_debug)
                if aircraft.loitering_debug
                else None
            ),
            out_of_range_since=aircraft.out_of_range_since,
            last_seen=aircraft.last_seen,
            track=[TrackPointModel.from_domain(p) for p in aircraft.track],
        )

    def to_domain(self) -> Aircraft:
        return Aircraft(
            icao=self.icao,
            callsign=self.callsign,
            track=[p.to_domain() for p in self.track],
            is_monitored=self.is_monitored,
            not_monitored_reason=self.not_monitored_reason,
            is_loitering=self.is_loitering,
            loitering_debug=self.loitering_debug.to_domain() if self.loitering_debug else None,
            out_of_range_since=self.out_of_range_since,
            last_seen=self.last_seen,
        )


class AircraftStateModel(CamelModel):
    altitude: float
    speed: float
    heading: float
    vertical_rate: float
    position: PositionModel

    @classmethod
    def from_domain(cls, state: AircraftState) -> "AircraftStateModel":
        return cls(
            altitude=state.altitude,
            speed=state.speed,
            heading=state.heading,
            vertical_rate=state.vertical_rate,
            position=PositionModel.from_domain(state.position),
        )

    def to_domain(self) -> AircraftState:
        return AircraftState(
            altitude=self.altitude,
            speed=self.speed,
            heading=self.heading,
            vertical_rate=self.vertical_rate,
            position=self.position.to_domain(),
        )


class LoiteringEventModel(CamelModel):
    """A loitering episode. ``firstDetected``/``lastUpdated`` are epoch ms."""

    id: str
    icao: str
    callsign: Optional[str] = None
    first_detected: int
    last_updated: int
    intersection_points: list[IntersectionModel] = Field(default_factory=list)
    aircraft_state: AircraftStateModel
    track: list[TrackPointModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, event: LoiteringEvent) -> "LoiteringEventModel":
        return cls(
            id=event.id,
            icao=event.icao,
            callsign=event.callsign,
            first_detected=event.first_detected,
            last_updated=event.last_updated,
            intersection_points=[
                IntersectionModel.from_domain(i) for i in event.intersection_points
            ],
            aircraft_state=AircraftStateModel.from_domain(event.aircraft_state),
            track=[TrackPointModel.from_domain(p) for p in event.track],
        )

    def to_domain(self) -> LoiteringEvent:
        return LoiteringEvent(
            id=self.id,
            icao=self.icao,
            callsign=self.callsign,
            first_detected=self.first_detected,
            last_updated=self.last_updated,
            intersection_points=[i.to_domain() for i in self.intersection_points],
            aircraft_state=self.aircraft_state.to_domain(),
            track=[p.to_domain() for p in self.track],
        )


__all__ = [
    "AircraftModel",
    "AircraftStateModel",
    "CamelModel",
    "IntersectionModel",
    "LoiteringDiagnosticModel",
    "LoiteringEventModel",
    "PositionModel",
    "SegmentModel",
    "TrackPointModel",
]
