"""Sea-distance oracle backed by a GeoJSON file of land polygons."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from loiterwatch.domain.tracking import BoundingBox, Position
from loiterwatch.services.geo import bounds_contains, distance_km, polygon_contains

logger = logging.getLogger("loiterwatch.ingestors.coastline")

Ring = tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class LandPolygon:
    """Outer ring of one land polygon as ``(lat, lon)`` vertices."""

    ring: Ring
    bounds: BoundingBox


def _to_land_polygon(coordinates: Any) -> LandPolygon | None:
    # GeoJSON rings are [lon, lat]; only the outer ring is used.
    if not coordinates or not coordinates[0]:
        return None
    ring = tuple((float(lat), float(lon)) for lon, lat, *_ in coordinates[0])
    if len(ring) < 3:
        return None
    lats = [vertex[0] for vertex in ring]
    lons = [vertex[1] for vertex in ring]
    return LandPolygon(
        ring=ring,
        bounds=BoundingBox(
            min_lat=min(lats), max_lat=max(lats), min_lon=min(lons), max_lon=max(lons)
        ),
    )


def parse_feature_collection(payload: dict[str, Any]) -> list[LandPolygon]:
    """Extract land polygons from a FeatureCollection, ignoring other geometry."""

    polygons: list[LandPolygon] = []
    for feature in payload.get("features") or []:
        geometry = (feature or {}).get("geometry") or {}
        kind = geometry.get("type")
        coordinates = geometry.get("coordinates")
        if kind == "Polygon":
            candidates: Iterable[Any] = [coordinates]
        elif kind == "MultiPolygon":
            candidates = coordinates or []
        else:
            continue
        for candidate in candidates:
            try:
                polygon = _to_land_polygon(candidate)
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed coastline polygon: %s", exc)
                continue
            if polygon is not None:
                polygons.append(polygon)
    return polygons


class CoastlineOracle:
    """Answer "how far is this position from land" from static polygons.

    Positions inside land are at distance 0. Otherwise the distance is the
    haversine distance to the nearest ring vertex, which is a close enough
    approximation for data digitised at a few kilometres. With no data loaded
    every answer is ``None``.
    """

    def __init__(self, polygons: Iterable[LandPolygon] = ()) -> None:
        self._polygons = list(polygons)

    @classmethod
    def load(cls, path: str | Path) -> "CoastlineOracle":
        """Read a GeoJSON file; a missing or unreadable file yields an empty oracle."""

        source = Path(path)
        try:
            payload = json.loads(source.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("Coastline data not found at %s; sea checks will fail", source)
            return cls()
        except (OSError, ValueError) as exc:
            logger.warning("Could not parse coastline data from %s: %s", source, exc)
            return cls()

        if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
            logger.warning("Coastline data at %s is not a FeatureCollection", source)
            return cls()

        polygons = parse_feature_collection(payload)
        logger.info("Loaded coastline data with %s polygons", len(polygons))
        return cls(polygons)

    def is_over_land(self, position: Position) -> bool:
        return any(
            bounds_contains(polygon.bounds, position)
            and polygon_contains(polygon.ring, position)
            for polygon in self._polygons
        )

    def min_distance_to_coastline(self, position: Position) -> Optional[float]:
        if not self._polygons:
            return None
        if self.is_over_land(position):
            return 0.0

        best = float("inf")
        for polygon in self._polygons:
            for lat, lon in polygon.ring:
                best = min(best, distance_km(position, Position(lat, lon)))
        return best


__all__ = ["CoastlineOracle", "LandPolygon", "parse_feature_collection"]
