"""Response models describing the monitoring area and thresholds."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from loiterwatch.domain.tracking import BoundingBox, MonitoringArea, Thresholds

from .tracking import AircraftModel, CamelModel


class BoundsModel(CamelModel):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @classmethod
    def from_domain(cls, bounds: BoundingBox) -> "BoundsModel":
        return cls(
            min_lat=bounds.min_lat,
            max_lat=bounds.max_lat,
            min_lon=bounds.min_lon,
            max_lon=bounds.max_lon,
        )


class MonitoringAreaModel(CamelModel):
    name: str
    bounds: BoundsModel
    polygon: Optional[list[tuple[float, float]]] = Field(
        default=None, description="Ring of [lat, lon] vertices"
    )

    @classmethod
    def from_domain(cls, area: MonitoringArea) -> "MonitoringAreaModel":
        return cls(
            name=area.name,
            bounds=BoundsModel.from_domain(area.bounds),
            polygon=[tuple(vertex) for vertex in area.polygon] if area.polygon else None,
        )


class RangeModel(CamelModel):
    min: float
    max: float


class CoastThresholdModel(CamelModel):
    min_distance: float = Field(..., description="Kilometres")


class LoiteringThresholdModel(CamelModel):
    max_radius: float = Field(..., description="Kilometres")
    min_duration: float = Field(..., description="Seconds")


class ThresholdsModel(CamelModel):
    altitude: RangeModel
    speed: RangeModel
    coast: CoastThresholdModel
    loitering: LoiteringThresholdModel

    @classmethod
    def from_domain(cls, thresholds: Thresholds) -> "ThresholdsModel":
        return cls(
            altitude=RangeModel(min=thresholds.altitude.min, max=thresholds.altitude.max),
            speed=RangeModel(min=thresholds.speed.min, max=thresholds.speed.max),
            coast=CoastThresholdModel(min_distance=thresholds.coast_min_distance_km),
            loitering=LoiteringThresholdModel(
                max_radius=thresholds.loitering.max_radius_km,
                min_duration=thresholds.loitering.min_duration_s,
            ),
        )


class AircraftListResponse(CamelModel):
    aircraft: list[AircraftModel]
    monitoring_area: MonitoringAreaModel


class MapConfigResponse(CamelModel):
    monitoring_area: MonitoringAreaModel
    thresholds: ThresholdsModel


__all__ = [
    "AircraftListResponse",
    "BoundsModel",
    "MapConfigResponse",
    "MonitoringAreaModel",
    "ThresholdsModel",
]
