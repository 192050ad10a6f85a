"""Geometric predicates used by classification and loitering detection.

Everything here is pure. Longitude is treated as x and latitude as y for the
planar segment tests; only ``distance_km`` works on the sphere.
"""

from __future__ import annotations

import math
from typing import Sequence

from loiterwatch.domain.tracking import BoundingBox, MonitoringArea, Position, Segment

EARTH_RADIUS_KM = 6371.0
EPSILON = 1e-10


def distance_km(a: Position, b: Position) -> float:
    """Great-circle distance between two positions in kilometres."""

    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(
        d_lambda / 2
    ) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def bounds_contains(bounds: BoundingBox, pos: Position) -> bool:
    return (
        bounds.min_lat <= pos.latitude <= bounds.max_lat
        and bounds.min_lon <= pos.longitude <= bounds.max_lon
    )


def polygon_contains(polygon: Sequence[Sequence[float]], pos: Position) -> bool:
    """Ray-casting parity test over a ring of ``(lat, lon)`` vertices."""

    lat, lon = pos.latitude, pos.longitude
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > lon) != (yj > lon) and lat < (xj - xi) * (lon - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def area_contains(area: MonitoringArea, pos: Position) -> bool:
    """Membership in the monitoring area.

    The bounding box is only a pre-filter; when a polygon is configured it
    decides.
    """

    if not bounds_contains(area.bounds, pos):
        return False
    if area.polygon:
        return polygon_contains(area.polygon, pos)
    return True


def _same_point(x1: float, y1: float, x2: float, y2: float) -> bool:
    return abs(x1 - x2) < EPSILON and abs(y1 - y2) < EPSILON


def _ranges_overlap(a1: float, a2: float, b1: float, b2: float) -> bool:
    return max(min(a1, a2), min(b1, b2)) <= min(max(a1, a2), max(b1, b2)) + EPSILON


def segments_intersect(s1: Segment, s2: Segment) -> bool:
    """Return True when two segments properly cross each other.

    Zero-length segments and segments that share an endpoint never count.
    Parallel segments count only when they are colinear and their extents
    overlap. Otherwise the crossing must lie strictly inside both segments.
    """

    x1, y1 = s1.start.longitude, s1.start.latitude
    x2, y2 = s1.end.longitude, s1.end.latitude
    x3, y3 = s2.start.longitude, s2.start.latitude
    x4, y4 = s2.end.longitude, s2.end.latitude

    if _same_point(x1, y1, x2, y2) or _same_point(x3, y3, x4, y4):
        return False

    if (
        _same_point(x1, y1, x3, y3)
        or _same_point(x1, y1, x4, y4)
        or _same_point(x2, y2, x3, y3)
        or _same_point(x2, y2, x4, y4)
    ):
        return False

    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    if abs(denominator) < EPSILON:
        # Parallel: only colinear overlapping segments intersect.
        cross = (x3 - x1) * (y2 - y1) - (y3 - y1) * (x2 - x1)
        if abs(cross) >= EPSILON:
            return False
        return _ranges_overlap(x1, x2, x3, x4) and _ranges_overlap(y1, y2, y3, y4)

    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denominator
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denominator
    return EPSILON < ua < 1 - EPSILON and EPSILON < ub < 1 - EPSILON


__all__ = [
    "EARTH_RADIUS_KM",
    "area_contains",
    "bounds_contains",
    "distance_km",
    "polygon_contains",
    "segments_intersect",
]
