import httpx
import pytest

from loiterwatch.domain.tracking import BoundingBox
from loiterwatch.ingestors.adsbfi import AdsbFiProvider
from loiterwatch.ingestors.base import ProviderError

BOUNDS = BoundingBox(min_lat=34.0, max_lat=36.0, min_lon=11.0, max_lon=13.0)


def _provider(handler, **kwargs) -> AdsbFiProvider:
    return AdsbFiProvider(
        base_url="https://example.test/api/v2",
        min_request_interval=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.anyio
async def test_adsbfi_provider_queries_center_and_radius():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        return httpx.Response(200, json={"now": 1714765200000, "aircraft": []})

    await _provider(handler).scan(BOUNDS)

    # Diagonal of a 2x2 degree box is ~2.83 degrees, ~170 nm.
    assert seen["path"] == "/api/v2/lat/35.0/lon/12.0/dist/170"


@pytest.mark.anyio
async def test_adsbfi_provider_caps_radius():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        return httpx.Response(200, json={"now": 1714765200000, "aircraft": []})

    wide = BoundingBox(min_lat=30.0, max_lat=38.0, min_lon=9.0, max_lon=22.0)
    await _provider(handler, max_distance_nm=250).scan(wide)

    assert seen["path"].endswith("/dist/250")


@pytest.mark.anyio
async def test_adsbfi_provider_normalizes_aircraft():
    payload = {
        "now": 1714765200000,
        "aircraft": [
            {
                "hex": "abc123",
                "flight": "TEST123 ",
                "lat": 35.0,
                "lon": 12.0,
                "alt_baro": 12000,
                "gs": 250.5,
                "track": 90.0,
                "baro_rate": -640,
                "seen_pos": 1.5,
            },
            {"hex": "def456", "lat": 35.2, "lon": 12.2, "alt_baro": "ground", "seen": 0},
            {"hex": "nopos", "alt_baro": 1000},
            {"hex": "far", "lat": 50.0, "lon": 2.0, "alt_baro": 30000},
        ],
    }

    def handler(request: httpx.Request):
        return httpx.Response(200, json=payload)

    result = await _provider(handler).scan(BOUNDS)

    assert result.timestamp == 1714765200.0
    assert [a.icao for a in result.aircraft] == ["ABC123", "DEF456"]
    first, second = result.aircraft
    assert first.callsign == "TEST123"
    assert first.altitude == 12000
    assert first.speed == 250.5
    assert first.heading == 90.0
    assert first.vertical_rate == -640
    assert first.timestamp == pytest.approx(1714765198.5)
    assert second.callsign is None
    assert second.altitude == 0


@pytest.mark.anyio
async def test_adsbfi_provider_raises_on_error_response():
    def handler(request: httpx.Request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(ProviderError, match="503"):
        await _provider(handler).scan(BOUNDS)


@pytest.mark.anyio
async def test_adsbfi_provider_raises_on_invalid_json():
    def handler(request: httpx.Request):
        return httpx.Response(200, text="not json")

    with pytest.raises(ProviderError):
        await _provider(handler).scan(BOUNDS)


@pytest.mark.anyio
async def test_adsbfi_provider_raises_on_timeout():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ProviderError, match="timed out"):
        await _provider(handler).scan(BOUNDS)


@pytest.mark.anyio
async def test_adsbfi_provider_drops_reports_with_non_numeric_position():
    payload = {
        "now": 1714765200000,
        "aircraft": [
            {"hex": "bad1", "lat": "n/a", "lon": 12.0, "alt_baro": 1000},
            {"hex": "good1", "lat": 35.0, "lon": 12.0, "alt_baro": 1000},
        ],
    }

    def handler(request: httpx.Request):
        return httpx.Response(200, json=payload)

    result = await _provider(handler).scan(BOUNDS)

    assert [a.icao for a in result.aircraft] == ["GOOD1"]
