from itertools import count

from loiterwatch.domain.tracking import Aircraft, Intersection, Segment, TrackPoint
from loiterwatch.services.event_ledger import EventLedger, merge_tracks


class FakeClock:
    def __init__(self, now: float = 10_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _point(ts, lat=35.0, lon=12.0) -> TrackPoint:
    return TrackPoint(
        latitude=lat, longitude=lon, timestamp=ts, altitude=10000.0, speed=200.0
    )


def _loitering_aircraft(icao="ABC123", newest_ts=400.0, callsign="TEST1") -> Aircraft:
    track = [_point(newest_ts - i * 10, lat=35.0 + i * 0.1) for i in range(4)]
    return Aircraft(icao=icao, callsign=callsign, track=track, is_loitering=True)


def _intersections(aircraft: Aircraft) -> list[Intersection]:
    track = aircraft.track
    pair = (Segment(track[0], track[1]), Segment(track[2], track[3]))
    return [Intersection(segments=pair, timestamp=track[0].timestamp)]


def _ledger(clock, **kwargs) -> EventLedger:
    ids = count(1)
    return EventLedger(clock=clock, id_factory=lambda: f"evt-{next(ids)}", **kwargs)


def test_report_ignores_aircraft_that_is_not_loitering():
    ledger = _ledger(FakeClock())
    aircraft = _loitering_aircraft()
    aircraft.is_loitering = False

    assert ledger.report(aircraft, _intersections(aircraft)) is None
    assert ledger.report(_loitering_aircraft(), []) is None
    assert len(ledger) == 0


def test_first_detection_creates_event():
    clock = FakeClock(10_000.0)
    ledger = _ledger(clock)
    aircraft = _loitering_aircraft()

    update = ledger.report(aircraft, _intersections(aircraft))

    assert update.created
    event = update.event
    assert event.id == "evt-1"
    assert event.first_detected == event.last_updated == 10_000_000
    assert event.callsign == "TEST1"
    assert event.aircraft_state.altitude == 10000.0
    assert event.aircraft_state.position.latitude == aircraft.track[0].latitude
    assert len(event.track) == 4
    assert ledger.get_latest_event("ABC123").id == "evt-1"


def test_detections_within_window_continue_the_event():
    clock = FakeClock(10_000.0)
    ledger = _ledger(clock, inactivity_window_s=600)
    first = _loitering_aircraft(newest_ts=400.0)
    ledger.report(first, _intersections(first))

    clock.now += 300
    second = _loitering_aircraft(newest_ts=420.0)
    update = ledger.report(second, _intersections(second))

    assert not update.created
    assert update.event.id == "evt-1"
    assert update.event.first_detected == 10_000_000
    assert update.event.last_updated == 10_300_000
    # 400, 390, 380, 370 merged with 420, 410, 400, 390.
    assert [p.timestamp for p in update.event.track] == [420, 410, 400, 390, 380, 370]
    assert len(ledger) == 1


def test_detection_after_window_opens_new_event():
    clock = FakeClock(10_000.0)
    ledger = _ledger(clock, inactivity_window_s=600)
    aircraft = _loitering_aircraft()
    ledger.report(aircraft, _intersections(aircraft))

    clock.now += 300
    ledger.report(aircraft, _intersections(aircraft))
    clock.now += 601
    update = ledger.report(aircraft, _intersections(aircraft))

    assert update.created
    assert update.event.id == "evt-2"
    assert ledger.get_latest_event("ABC123").id == "evt-2"
    assert ledger.get_event("evt-1") is not None
    assert len(ledger) == 2


def test_expire_removes_only_events_past_retention():
    clock = FakeClock(10_000.0)
    ledger = _ledger(clock, retention_s=3600)
    old = _loitering_aircraft(icao="OLD")
    ledger.report(old, _intersections(old))

    clock.now += 3000
    young = _loitering_aircraft(icao="YOUNG")
    ledger.report(young, _intersections(young))

    clock.now += 1000
    expired = ledger.expire()

    assert expired == ["evt-1"]
    assert [e.icao for e in ledger.list_events()] == ["YOUNG"]
    assert ledger.get_latest_event("OLD") is None


def test_list_events_is_most_recent_first():
    clock = FakeClock(10_000.0)
    ledger = _ledger(clock)
    for icao in ("A", "B", "C"):
        aircraft = _loitering_aircraft(icao=icao)
        ledger.report(aircraft, _intersections(aircraft))
        clock.now += 10

    assert [e.icao for e in ledger.list_events()] == ["C", "B", "A"]


def test_returned_events_are_detached():
    ledger = _ledger(FakeClock())
    aircraft = _loitering_aircraft()
    ledger.report(aircraft, _intersections(aircraft))

    event = ledger.get_event("evt-1")
    event.track.clear()
    aircraft.track.clear()

    assert len(ledger.get_event("evt-1").track) == 4


def test_merge_tracks_prefers_newer_samples_and_caps_length():
    older = [_point(30, lat=1.0), _point(20), _point(10)]
    newer = [_point(40), _point(30, lat=2.0)]

    merged = merge_tracks(newer, older, max_points=3)

    assert [p.timestamp for p in merged] == [40, 30, 20]
    assert merged[1].latitude == 2.0
