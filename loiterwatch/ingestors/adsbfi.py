"""Position provider backed by the adsb.fi open data API."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Any, Optional

import httpx

from loiterwatch.config import settings
from loiterwatch.domain.tracking import BoundingBox, Position
from loiterwatch.ingestors.base import ProviderError, ScanAircraft, ScanResult
from loiterwatch.services.geo import bounds_contains

logger = logging.getLogger("loiterwatch.ingestors.adsbfi")


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def _as_coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


class AdsbFiProvider:
    """Query adsb.fi around the centre of the requested bounds.

    The API takes a centre and a radius, so the radius covers the bbox diagonal
    (capped by the provider's limit) and results are trimmed back to the bbox.
    Consecutive calls are spaced by at least ``min_request_interval`` seconds.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        max_distance_nm: float | None = None,
        min_request_interval: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.adsbfi_base_url).rstrip("/")
        self.timeout = timeout or settings.provider_timeout
        self.max_distance_nm = max_distance_nm or settings.adsbfi_max_distance_nm
        self.min_request_interval = (
            settings.provider_min_request_interval
            if min_request_interval is None
            else min_request_interval
        )
        self.transport = transport
        self._last_request_at: float | None = None

    async def _respect_rate_limit(self) -> None:
        if self._last_request_at is not None:
            elapsed = time.monotonic() - self._last_request_at
            wait = self.min_request_interval - elapsed
            if wait > 0:
                logger.debug("Rate limiting: waiting %.2fs before next request", wait)
                await asyncio.sleep(wait)
        self._last_request_at = time.monotonic()

    def _build_url(self, bounds: BoundingBox) -> str:
        center_lat = (bounds.min_lat + bounds.max_lat) / 2
        center_lon = (bounds.min_lon + bounds.max_lon) / 2
        lat_diff = bounds.max_lat - bounds.min_lat
        lon_diff = bounds.max_lon - bounds.min_lon
        # One degree is roughly 60 nautical miles.
        distance_nm = math.sqrt(lat_diff**2 + lon_diff**2) * 60
        radius = min(distance_nm, self.max_distance_nm)
        return f"{self.base_url}/lat/{center_lat}/lon/{center_lon}/dist/{radius:.0f}"

    async def scan(self, bounds: BoundingBox) -> ScanResult:
        await self._respect_rate_limit()
        url = self._build_url(bounds)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            logger.warning("adsb.fi request timed out: %s", exc)
            raise ProviderError("adsb.fi request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("adsb.fi request failed: %s", exc)
            raise ProviderError("adsb.fi request failed") from exc

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "adsb.fi returned HTTP %s: %s", exc.response.status_code, response.text
            )
            raise ProviderError(
                f"adsb.fi returned HTTP {exc.response.status_code}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse adsb.fi JSON response: %s", exc)
            raise ProviderError("adsb.fi response is not valid JSON") from exc

        if not isinstance(payload, dict):
            raise ProviderError("adsb.fi response has unexpected shape")

        now = payload.get("now")
        # adsb.fi reports ``now`` in milliseconds.
        snapshot_ts = _as_float(now, time.time() * 1000) / 1000

        aircraft: list[ScanAircraft] = []
        for entry in payload.get("aircraft") or []:
            report = self._normalize(entry, snapshot_ts)
            if report is None:
                continue
            if not bounds_contains(bounds, Position(report.latitude, report.longitude)):
                continue
            aircraft.append(report)

        logger.debug("Received %s aircraft from adsb.fi", len(aircraft))
        return ScanResult(timestamp=snapshot_ts, aircraft=aircraft)

    def _normalize(self, entry: Any, snapshot_ts: float) -> Optional[ScanAircraft]:
        if not isinstance(entry, dict):
            return None
        icao = entry.get("hex")
        lat = _as_coordinate(entry.get("lat"))
        lon = _as_coordinate(entry.get("lon"))
        if not icao or lat is None or lon is None:
            return None

        seen = entry.get("seen_pos", entry.get("seen"))
        timestamp = snapshot_ts - seen if isinstance(seen, (int, float)) else snapshot_ts
        callsign = (entry.get("flight") or "").strip() or None

        return ScanAircraft(
            icao=str(icao).upper(),
            callsign=callsign,
            latitude=lat,
            longitude=lon,
            timestamp=timestamp,
            # "ground" is reported as a string altitude.
            altitude=_as_float(entry.get("alt_baro")),
            speed=_as_float(entry.get("gs")),
            heading=_as_float(entry.get("track")),
            vertical_rate=_as_float(entry.get("baro_rate")),
        )


__all__ = ["AdsbFiProvider"]
