"""Position providers and the coastline oracle."""

from loiterwatch.config import Settings

from .adsbfi import AdsbFiProvider
from .base import ProviderError, ScanAircraft, ScanResult, ScannerProvider
from .coastline import CoastlineOracle
from .opensky import OpenSkyProvider


def build_provider(config: Settings) -> ScannerProvider:
    """Instantiate the provider named by ``config.provider``."""

    name = config.provider.lower()
    if name == "adsbfi":
        return AdsbFiProvider(
            base_url=config.adsbfi_base_url,
            timeout=config.provider_timeout,
            max_distance_nm=config.adsbfi_max_distance_nm,
            min_request_interval=config.provider_min_request_interval,
        )
    if name == "opensky":
        return OpenSkyProvider(
            base_url=config.opensky_base_url, timeout=config.provider_timeout
        )
    raise ValueError(f"Unknown provider: {config.provider}")


__all__ = [
    "AdsbFiProvider",
    "CoastlineOracle",
    "OpenSkyProvider",
    "ProviderError",
    "ScanAircraft",
    "ScanResult",
    "ScannerProvider",
    "build_provider",
]
