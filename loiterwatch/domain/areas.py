"""Built-in monitoring area definitions."""

from __future__ import annotations

from loiterwatch.domain.tracking import BoundingBox

# Central Mediterranean ring, (lat, lon) vertices.
CENTRAL_MED_POLYGON: tuple[tuple[float, float], ...] = (
    (37.557, 12.676),
    (37.335, 9.863),
    (35.23, 11.113),
    (33.866, 10.087),
    (32.789, 12.481),
    (32.887, 13.195),
    (32.369, 15.082),
    (31.477, 15.631),
    (30.991, 17.625),
    (30.244, 19.192),
    (30.272, 19.122),
    (31.204, 20.164),
    (31.976, 19.948),
    (32.94, 21.716),
    (36.681, 19.585),
    (36.681, 15.134),
)

# Envelope of CENTRAL_MED_POLYGON, used as the fast pre-filter.
CENTRAL_MED_BOUNDS = BoundingBox(
    min_lat=30.244,
    max_lat=37.557,
    min_lon=9.863,
    max_lon=21.716,
)

__all__ = ["CENTRAL_MED_BOUNDS", "CENTRAL_MED_POLYGON"]
