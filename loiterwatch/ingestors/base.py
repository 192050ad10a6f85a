"""Provider contract for position report sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from loiterwatch.domain.tracking import BoundingBox


class ProviderError(RuntimeError):
    """Raised when a provider cannot deliver a scan (network, HTTP, payload)."""


@dataclass
class ScanAircraft:
    """One position report as delivered by a provider."""

    icao: str
    callsign: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    timestamp: float
    altitude: float = 0.0
    speed: float = 0.0
    heading: float = 0.0
    vertical_rate: float = 0.0
    distance_to_coast: Optional[float] = None


@dataclass
class ScanResult:
    """Reports from one provider call; ``timestamp`` is seconds since epoch."""

    timestamp: float
    aircraft: list[ScanAircraft] = field(default_factory=list)


class ScannerProvider(Protocol):
    """Source of aircraft position reports for a bounding box."""

    async def scan(self, bounds: BoundingBox) -> ScanResult:
        """Return current reports inside ``bounds`` or raise ProviderError."""


__all__ = ["ProviderError", "ScanAircraft", "ScanResult", "ScannerProvider"]
