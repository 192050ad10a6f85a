import pytest

from loiterwatch.domain.tracking import BoundingBox, MonitoringArea, Position, Segment, TrackPoint
from loiterwatch.services.geo import (
    area_contains,
    bounds_contains,
    distance_km,
    polygon_contains,
    segments_intersect,
)

BOX = BoundingBox(min_lat=34.0, max_lat=36.0, min_lon=11.0, max_lon=13.0)
# Triangle inside BOX, (lat, lon) vertices.
TRIANGLE = ((34.0, 11.0), (36.0, 11.0), (34.0, 13.0))


def _seg(lat1, lon1, lat2, lon2) -> Segment:
    return Segment(
        start=TrackPoint(latitude=lat1, longitude=lon1),
        end=TrackPoint(latitude=lat2, longitude=lon2),
    )


def test_distance_one_degree_of_latitude():
    assert distance_km(Position(0.0, 0.0), Position(1.0, 0.0)) == pytest.approx(111.19, rel=1e-3)


def test_distance_same_point_is_zero():
    assert distance_km(Position(35.0, 12.0), Position(35.0, 12.0)) == 0


def test_bounds_are_inclusive():
    assert bounds_contains(BOX, Position(34.0, 11.0))
    assert bounds_contains(BOX, Position(36.0, 13.0))
    assert not bounds_contains(BOX, Position(36.0001, 12.0))


def test_polygon_contains_uses_lat_lon_vertices():
    assert polygon_contains(TRIANGLE, Position(34.5, 11.5))
    assert not polygon_contains(TRIANGLE, Position(35.8, 12.8))


def test_area_polygon_is_authoritative_over_bbox():
    area = MonitoringArea(bounds=BOX, polygon=TRIANGLE)
    # Inside the bbox but outside the triangle.
    assert not area_contains(area, Position(35.8, 12.8))
    assert area_contains(area, Position(34.5, 11.5))
    assert not area_contains(area, Position(30.0, 11.5))


def test_area_without_polygon_uses_bbox():
    area = MonitoringArea(bounds=BOX)
    assert area_contains(area, Position(35.8, 12.8))


def test_crossing_segments_intersect():
    assert segments_intersect(_seg(0, 0, 2, 2), _seg(0, 2, 2, 0))


def test_disjoint_segments_do_not_intersect():
    assert not segments_intersect(_seg(0, 0, 1, 1), _seg(5, 0, 6, 1))


def test_parallel_segments_do_not_intersect():
    assert not segments_intersect(_seg(0, 0, 0, 2), _seg(1, 0, 1, 2))


def test_colinear_overlapping_segments_intersect():
    assert segments_intersect(_seg(0, 0, 0, 2), _seg(0, 1, 0, 3))


def test_colinear_disjoint_segments_do_not_intersect():
    assert not segments_intersect(_seg(0, 0, 0, 1), _seg(0, 2, 0, 3))


def test_shared_endpoint_is_not_a_crossing():
    assert not segments_intersect(_seg(0, 0, 1, 1), _seg(1, 1, 0, 2))


def test_zero_length_segment_never_intersects():
    assert not segments_intersect(_seg(1, 1, 1, 1), _seg(0, 0, 2, 2))


def test_touching_interior_at_an_endpoint_is_not_a_crossing():
    # Second segment ends exactly on the first one's interior.
    assert not segments_intersect(_seg(0, 0, 0, 2), _seg(0, 1, 1, 1))


def test_predicate_is_symmetric():
    a, b = _seg(0, 0, 2, 2), _seg(0, 2, 2, 0)
    assert segments_intersect(a, b) == segments_intersect(b, a)
