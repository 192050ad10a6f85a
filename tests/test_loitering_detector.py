from loiterwatch.domain.tracking import (
    BoundingBox,
    LoiteringThresholds,
    MonitoringArea,
    Range,
    Thresholds,
    TrackPoint,
)
from loiterwatch.services.loitering_detector import LoiteringDetector, build_segments

AREA = MonitoringArea(
    bounds=BoundingBox(min_lat=34.0, max_lat=36.0, min_lon=11.0, max_lon=13.0),
    name="Test",
)
THRESHOLDS = Thresholds(
    altitude=Range(min=100, max=25000),
    speed=Range(min=50, max=300),
    coast_min_distance_km=8,
    loitering=LoiteringThresholds(max_radius_km=10, min_duration_s=900),
)

BOWTIE = [(35.0, 12.0), (35.5, 12.5), (35.0, 12.5), (35.5, 12.0)]


def _track(coords, start_ts=400.0, step=100.0, **overrides):
    """Newest-first track over ``coords`` with descending timestamps."""

    points = []
    for index, (lat, lon) in enumerate(coords):
        values = dict(
            latitude=lat,
            longitude=lon,
            timestamp=start_ts - index * step,
            altitude=10000.0,
            speed=200.0,
            distance_to_coast=50.0,
        )
        values.update(overrides)
        points.append(TrackPoint(**values))
    return points


def test_bowtie_is_loitering():
    track = _track(BOWTIE)
    result = LoiteringDetector(AREA, THRESHOLDS).detect(track)

    assert result.is_loitering
    assert len(result.intersections) == 1
    intersection = result.intersections[0]
    assert intersection.timestamp == 400.0
    first, second = intersection.segments
    assert first.start == track[0]
    assert second.end == track[3]
    assert result.diagnostic is not None
    assert result.diagnostic.reason == "Path crosses itself"


def test_bowtie_outside_area_is_not_loitering():
    far_area = MonitoringArea(
        bounds=BoundingBox(min_lat=0.0, max_lat=1.0, min_lon=0.0, max_lon=1.0)
    )
    result = LoiteringDetector(far_area, THRESHOLDS).detect(_track(BOWTIE))

    assert not result.is_loitering
    assert result.diagnostic is None


def test_straight_track_is_never_loitering():
    coords = [(34.1 + i * 0.05, 11.1 + i * 0.05) for i in range(30)]
    result = LoiteringDetector(AREA, THRESHOLDS).detect(_track(coords, start_ts=5000.0))

    assert not result.is_loitering


def test_short_track_is_never_loitering():
    result = LoiteringDetector(AREA, THRESHOLDS).detect(_track(BOWTIE[:3]))

    assert not result.is_loitering


def test_crossing_with_unmonitored_endpoint_does_not_count():
    track = _track(BOWTIE)
    # Oldest sample was still climbing out.
    track[3] = TrackPoint(
        latitude=35.5,
        longitude=12.0,
        timestamp=100.0,
        altitude=50.0,
        speed=200.0,
        distance_to_coast=50.0,
    )

    result = LoiteringDetector(AREA, THRESHOLDS).detect(track)

    assert not result.is_loitering


def test_adjacent_segments_are_not_compared():
    # A sharp reversal doubles back over the previous leg.
    coords = [(35.0, 12.0), (35.5, 12.0), (35.2, 12.0), (35.2, 12.3)]
    result = LoiteringDetector(AREA, THRESHOLDS).detect(_track(coords))

    assert not result.is_loitering


def test_build_segments_pairs_consecutive_samples():
    track = _track(BOWTIE)
    segments = build_segments(track)

    assert len(segments) == 3
    assert segments[1].start == track[1]
    assert segments[1].end == track[2]
