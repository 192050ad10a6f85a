from loiterwatch.domain.tracking import (
    BoundingBox,
    LoiteringThresholds,
    MonitoringArea,
    Range,
    Thresholds,
    TrackPoint,
)
from loiterwatch.services.classifier import classify

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


def _point(**overrides) -> TrackPoint:
    values = dict(
        latitude=35.0,
        longitude=12.0,
        timestamp=100.0,
        altitude=10000.0,
        speed=200.0,
        distance_to_coast=50.0,
    )
    values.update(overrides)
    return TrackPoint(**values)


class FakeOracle:
    def __init__(self, distance):
        self.distance = distance
        self.calls = 0

    def min_distance_to_coastline(self, position):
        self.calls += 1
        return self.distance


def test_point_inside_envelope_is_monitored():
    verdict = classify(_point(), AREA, THRESHOLDS)
    assert verdict.monitored
    assert verdict.reason is None


def test_outside_area_reason_names_the_area():
    verdict = classify(_point(latitude=40.0), AREA, THRESHOLDS)
    assert not verdict.monitored
    assert verdict.reason == "Aircraft is outside the Test monitoring area."


def test_unknown_coast_distance_fails_sea_check():
    verdict = classify(_point(distance_to_coast=None), AREA, THRESHOLDS)
    assert verdict.reason == "Aircraft is over land or too close to coast."


def test_coast_distance_at_threshold_passes():
    assert classify(_point(distance_to_coast=8.0), AREA, THRESHOLDS).monitored
    assert not classify(_point(distance_to_coast=7.9), AREA, THRESHOLDS).monitored


def test_oracle_is_used_when_point_has_no_distance():
    oracle = FakeOracle(20.0)
    verdict = classify(_point(distance_to_coast=None), AREA, THRESHOLDS, oracle)
    assert verdict.monitored
    assert oracle.calls == 1


def test_precomputed_distance_wins_over_oracle():
    oracle = FakeOracle(0.0)
    assert classify(_point(distance_to_coast=30.0), AREA, THRESHOLDS, oracle).monitored
    assert oracle.calls == 0


def test_oracle_without_data_fails_sea_check():
    verdict = classify(_point(distance_to_coast=None), AREA, THRESHOLDS, FakeOracle(None))
    assert not verdict.monitored


def test_speed_reasons():
    slow = classify(_point(speed=42.0), AREA, THRESHOLDS)
    fast = classify(_point(speed=350.0), AREA, THRESHOLDS)
    assert slow.reason == "Aircraft speed (42.0 knots) is too slow (minimum: 50 knots)."
    assert fast.reason == "Aircraft speed (350.0 knots) is too fast (maximum: 300 knots)."


def test_altitude_reasons():
    low = classify(_point(altitude=50.0), AREA, THRESHOLDS)
    high = classify(_point(altitude=30000.0), AREA, THRESHOLDS)
    assert low.reason == "Aircraft altitude (50.0 feet) is too low (minimum: 100 feet)."
    assert high.reason == "Aircraft altitude (30000.0 feet) is too high (maximum: 25000 feet)."


def test_precedence_is_area_sea_speed_altitude():
    everything_wrong = _point(
        latitude=40.0, distance_to_coast=None, speed=10.0, altitude=10.0
    )
    assert "outside" in classify(everything_wrong, AREA, THRESHOLDS).reason

    land_slow_low = _point(distance_to_coast=1.0, speed=10.0, altitude=10.0)
    assert "coast" in classify(land_slow_low, AREA, THRESHOLDS).reason

    slow_and_low = _point(speed=10.0, altitude=10.0)
    assert "speed" in classify(slow_and_low, AREA, THRESHOLDS).reason
