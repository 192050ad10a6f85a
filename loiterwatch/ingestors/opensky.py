"""Position provider backed by the OpenSky Network REST API."""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Optional

import httpx

from loiterwatch.config import settings
from loiterwatch.domain.tracking import BoundingBox
from loiterwatch.ingestors.base import ProviderError, ScanAircraft, ScanResult

logger = logging.getLogger("loiterwatch.ingestors.opensky")


def _as_coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _m_to_feet(value_m: Any) -> float | None:
    if value_m is None:
        return None
    try:
        return float(value_m) * 3.28084
    except (TypeError, ValueError):  # pragma: no cover - defensive conversion
        return None


def _ms_to_knots(value_ms: Any) -> float | None:
    if value_ms is None:
        return None
    try:
        return float(value_ms) * 1.94384
    except (TypeError, ValueError):  # pragma: no cover - defensive conversion
        return None


def _ms_to_fpm(value_ms: Any) -> float | None:
    if value_ms is None:
        return None
    try:
        return float(value_ms) * 196.850394
    except (TypeError, ValueError):  # pragma: no cover - defensive conversion
        return None


class OpenSkyProvider:
    """Fetch state vectors inside a bounding box from OpenSky."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.opensky_base_url
        self.timeout = timeout or settings.provider_timeout
        self.transport = transport

    async def scan(self, bounds: BoundingBox) -> ScanResult:
        params = {
            "lamin": bounds.min_lat,
            "lomin": bounds.min_lon,
            "lamax": bounds.max_lat,
            "lomax": bounds.max_lon,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("OpenSky request timed out: %s", exc)
            raise ProviderError("OpenSky request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("OpenSky request failed: %s", exc)
            raise ProviderError("OpenSky request failed") from exc

        if response.status_code == 429:
            logger.warning("OpenSky rate limit encountered: %s", response.text)
            raise ProviderError("OpenSky rate limit encountered")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "OpenSky returned HTTP %s: %s", exc.response.status_code, exc
            )
            raise ProviderError(
                f"OpenSky returned HTTP {exc.response.status_code}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse OpenSky JSON response: %s", exc)
            raise ProviderError("OpenSky response is not valid JSON") from exc

        raw_states = []
        snapshot_ts = time.time()
        if isinstance(payload, dict):
            raw_states = payload.get("states", []) or []
            if isinstance(payload.get("time"), (int, float)):
                snapshot_ts = float(payload["time"])

        aircraft: list[ScanAircraft] = []
        for entry in raw_states:
            report = self._normalize_state(entry, snapshot_ts)
            if report:
                aircraft.append(report)

        logger.debug("Received %s aircraft from OpenSky", len(aircraft))
        return ScanResult(timestamp=snapshot_ts, aircraft=aircraft)

    def _normalize_state(self, entry: Any, snapshot_ts: float) -> Optional[ScanAircraft]:
        if not isinstance(entry, (list, tuple)) or len(entry) < 7:
            return None

        icao = entry[0].upper() if isinstance(entry[0], str) and entry[0] else None
        callsign = entry[1].strip() if isinstance(entry[1], str) else None
        lon = _as_coordinate(entry[5])
        lat = _as_coordinate(entry[6])
        # Prefer geometric altitude; barometric sits at index 7.
        altitude_m = entry[13] if len(entry) > 13 and entry[13] is not None else None
        if altitude_m is None and len(entry) > 7:
            altitude_m = entry[7]
        velocity_ms = entry[9] if len(entry) > 9 else None
        heading = _as_coordinate(entry[10]) if len(entry) > 10 else None
        vertical_rate_ms = entry[11] if len(entry) > 11 else None
        # time_position dates the position; last_contact may be newer than it.
        position_ts = _as_coordinate(entry[3])
        if position_ts is None and len(entry) > 4:
            position_ts = _as_coordinate(entry[4])

        if not icao or lat is None or lon is None:
            return None

        return ScanAircraft(
            icao=icao,
            callsign=callsign or None,
            latitude=lat,
            longitude=lon,
            timestamp=position_ts if position_ts is not None else snapshot_ts,
            altitude=_m_to_feet(altitude_m) or 0.0,
            speed=_ms_to_knots(velocity_ms) or 0.0,
            heading=heading if heading is not None else 0.0,
            vertical_rate=_ms_to_fpm(vertical_rate_ms) or 0.0,
        )


__all__ = ["OpenSkyProvider"]
