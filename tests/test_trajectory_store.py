from loiterwatch.domain.tracking import (
    Aircraft,
    BoundingBox,
    LoiteringThresholds,
    MonitoringArea,
    Range,
    Thresholds,
    TrackPoint,
)
from loiterwatch.services.trajectory_store import TrajectoryStore

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

# Chronological order.
BOWTIE = [(35.5, 12.0), (35.0, 12.5), (35.5, 12.5), (35.0, 12.0)]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _point(lat, lon, ts, **overrides) -> TrackPoint:
    values = dict(
        latitude=lat,
        longitude=lon,
        timestamp=ts,
        altitude=10000.0,
        speed=200.0,
        distance_to_coast=50.0,
    )
    values.update(overrides)
    return TrackPoint(**values)


def _store(**kwargs) -> TrajectoryStore:
    kwargs.setdefault("clock", FakeClock())
    return TrajectoryStore(AREA, THRESHOLDS, **kwargs)


def _fly_bowtie(store, icao="ABC123", start_ts=500.0):
    outcome = None
    for index, (lat, lon) in enumerate(BOWTIE):
        outcome = store.ingest(icao, _point(lat, lon, start_ts + index * 10), "TEST1")
    return outcome


def test_first_sample_creates_aircraft():
    store = _store()
    outcome = store.ingest("ABC123", _point(35.0, 12.0, 500.0), "TEST1")

    assert outcome.accepted
    assert outcome.aircraft.track == [_point(35.0, 12.0, 500.0)]
    assert outcome.aircraft.is_monitored
    assert outcome.aircraft.last_seen == 1000.0
    assert len(store) == 1


def test_identical_sample_is_ignored():
    store = _store()
    store.ingest("ABC123", _point(35.0, 12.0, 500.0))
    outcome = store.ingest("ABC123", _point(35.0, 12.0, 510.0))

    assert not outcome.accepted
    assert len(store.get("ABC123").track) == 1


def test_identical_sample_does_not_change_flags():
    store = _store()
    _fly_bowtie(store)
    before = store.get("ABC123")

    outcome = store.ingest("ABC123", before.latest)

    after = store.get("ABC123")
    assert not outcome.accepted
    assert len(after.track) == len(before.track)
    assert after.is_loitering == before.is_loitering
    assert after.is_monitored == before.is_monitored


def test_track_is_newest_first_with_late_samples_slotted_in():
    store = _store()
    store.ingest("ABC123", _point(35.0, 12.0, 500.0))
    store.ingest("ABC123", _point(35.1, 12.1, 520.0))
    store.ingest("ABC123", _point(35.05, 12.05, 510.0))

    timestamps = [p.timestamp for p in store.get("ABC123").track]
    assert timestamps == [520.0, 510.0, 500.0]


def test_sample_with_existing_timestamp_is_dropped():
    store = _store()
    store.ingest("ABC123", _point(35.0, 12.0, 500.0))
    store.ingest("ABC123", _point(35.1, 12.1, 520.0))
    outcome = store.ingest("ABC123", _point(35.3, 12.3, 500.0))

    assert not outcome.accepted
    assert len(store.get("ABC123").track) == 2


def test_track_age_is_bounded():
    store = _store(max_track_age_s=100)
    for index in range(10):
        store.ingest("ABC123", _point(35.0 + index * 0.01, 12.0, 100.0 + index * 50))

    track = store.get("ABC123").track
    assert track[0].timestamp - track[-1].timestamp <= 100
    assert [p.timestamp for p in track] == [550.0, 500.0, 450.0]


def test_bowtie_flags_loitering_and_returns_intersections():
    store = _store()
    outcome = _fly_bowtie(store)

    assert outcome.aircraft.is_loitering
    assert len(outcome.intersections) == 1
    assert outcome.aircraft.loitering_debug is not None


def test_callsign_is_updated_when_provided():
    store = _store()
    store.ingest("ABC123", _point(35.0, 12.0, 500.0))
    store.ingest("ABC123", _point(35.1, 12.1, 510.0), "NEW1")

    assert store.get("ABC123").callsign == "NEW1"


def test_grace_period_keeps_loitering_then_clears_it():
    store = _store(out_of_range_grace_s=30)
    _fly_bowtie(store, start_ts=500.0)

    # Newest sample leaves the area; still inside the grace period.
    first_out = store.ingest("ABC123", _point(40.0, 20.0, 540.0))
    assert not first_out.aircraft.is_monitored
    assert first_out.aircraft.out_of_range_since == 540.0
    assert first_out.aircraft.is_loitering

    second_out = store.ingest("ABC123", _point(40.1, 20.1, 580.0))
    assert not second_out.aircraft.is_loitering
    assert second_out.aircraft.loitering_debug is None
    assert second_out.intersections == []
    assert "outside" in second_out.aircraft.not_monitored_reason


def test_returning_to_the_envelope_clears_the_grace_timer():
    store = _store()
    store.ingest("ABC123", _point(35.0, 12.0, 500.0, speed=10.0))
    assert store.get("ABC123").out_of_range_since == 500.0

    store.ingest("ABC123", _point(35.1, 12.1, 510.0))
    assert store.get("ABC123").out_of_range_since is None


def test_cleanup_removes_only_inactive_aircraft():
    clock = FakeClock(1000.0)
    store = _store(inactive_after_s=900, clock=clock)
    store.ingest("OLD", _point(35.0, 12.0, 50.0))
    store.ingest("NEW", _point(35.0, 12.0, 500.0))

    removed = store.cleanup_inactive()

    assert removed == ["OLD"]
    assert store.get("OLD") is None
    assert store.get("NEW") is not None


def test_readers_get_copies():
    store = _store()
    store.ingest("ABC123", _point(35.0, 12.0, 500.0))

    copy = store.get("ABC123")
    copy.track.clear()

    assert len(store.get("ABC123").track) == 1


def test_restore_skips_empty_tracks():
    store = _store()
    restored = store.restore(
        [
            Aircraft(icao="A", callsign=None, track=[_point(35.0, 12.0, 500.0)]),
            Aircraft(icao="B", callsign=None, track=[]),
        ]
    )

    assert restored == 1
    assert [a.icao for a in store.list_aircraft()] == ["A"]
