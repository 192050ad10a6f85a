"""Configuration settings for the LoiterWatch service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from loiterwatch.domain.areas import CENTRAL_MED_BOUNDS, CENTRAL_MED_POLYGON
from loiterwatch.domain.tracking import (
    BoundingBox,
    LoiteringThresholds,
    MonitoringArea,
    Range,
    Thresholds,
)

logger = logging.getLogger("loiterwatch.config")

# Shared SSM client for secret reads. Default to a region so imports do not
# fail in environments without AWS configuration (e.g. CI test runners).
_ssm_client = boto3.client(
    "ssm",
    region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
)

TELEGRAM_TOKEN_PARAMETER = "/loiterwatch/telegram/bot_token"


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    return float(value) if value else default


@lru_cache(maxsize=1)
def get_telegram_bot_token() -> str:
    """Fetch the Telegram bot token from AWS SSM Parameter Store.

    The value is cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the token results in a runtime error.
    """

    try:
        response = _ssm_client.get_parameter(
            Name=TELEGRAM_TOKEN_PARAMETER, WithDecryption=True
        )
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load Telegram bot token from SSM: %s", exc)
        raise RuntimeError("Unable to load Telegram bot token from SSM") from exc

    if not value:
        logger.error("Received empty Telegram bot token from SSM")
        raise RuntimeError("Telegram bot token not configured in SSM")

    return value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    env: str = os.getenv("LOITERWATCH_ENV", "local")
    log_level: str = os.getenv("LOITERWATCH_LOG_LEVEL", "INFO")

    # Scan loop
    scanner_enabled: bool = _get_bool("LOITERWATCH_SCANNER_ENABLED", True)
    scan_interval_seconds: float = _get_float("LOITERWATCH_SCAN_INTERVAL_SECONDS", 15.0)

    # Position provider
    provider: str = os.getenv("LOITERWATCH_PROVIDER", "adsbfi")
    adsbfi_base_url: str = os.getenv(
        "LOITERWATCH_ADSBFI_BASE_URL", "https://opendata.adsb.fi/api/v2"
    )
    adsbfi_max_distance_nm: float = _get_float("LOITERWATCH_ADSBFI_MAX_DISTANCE_NM", 250.0)
    opensky_base_url: str = os.getenv(
        "LOITERWATCH_OPENSKY_BASE_URL",
        "https://opensky-network.org/api/states/all",
    )
    provider_timeout: float = _get_float("LOITERWATCH_PROVIDER_TIMEOUT", 10.0)
    provider_min_request_interval: float = _get_float(
        "LOITERWATCH_PROVIDER_MIN_REQUEST_INTERVAL", 1.0
    )

    # Monitoring area
    area_name: str = os.getenv("LOITERWATCH_AREA_NAME", "Central Mediterranean")
    area_min_lat: float = _get_float("LOITERWATCH_AREA_MIN_LAT", CENTRAL_MED_BOUNDS.min_lat)
    area_max_lat: float = _get_float("LOITERWATCH_AREA_MAX_LAT", CENTRAL_MED_BOUNDS.max_lat)
    area_min_lon: float = _get_float("LOITERWATCH_AREA_MIN_LON", CENTRAL_MED_BOUNDS.min_lon)
    area_max_lon: float = _get_float("LOITERWATCH_AREA_MAX_LON", CENTRAL_MED_BOUNDS.max_lon)
    area_use_polygon: bool = _get_bool("LOITERWATCH_AREA_USE_POLYGON", True)

    # Monitoring thresholds
    altitude_min_ft: float = _get_float("LOITERWATCH_ALTITUDE_MIN_FT", 100.0)
    altitude_max_ft: float = _get_float("LOITERWATCH_ALTITUDE_MAX_FT", 25000.0)
    speed_min_kt: float = _get_float("LOITERWATCH_SPEED_MIN_KT", 50.0)
    speed_max_kt: float = _get_float("LOITERWATCH_SPEED_MAX_KT", 300.0)
    coast_min_distance_km: float = _get_float("LOITERWATCH_COAST_MIN_DISTANCE_KM", 8.0)
    loiter_max_radius_km: float = _get_float("LOITERWATCH_LOITER_MAX_RADIUS_KM", 10.0)
    loiter_min_duration_s: float = _get_float("LOITERWATCH_LOITER_MIN_DURATION_S", 900.0)

    # Trajectories
    max_track_age_seconds: float = _get_float("LOITERWATCH_MAX_TRACK_AGE_SECONDS", 1200.0)
    out_of_range_grace_seconds: float = _get_float(
        "LOITERWATCH_OUT_OF_RANGE_GRACE_SECONDS", 30.0
    )
    inactive_aircraft_seconds: float = _get_float(
        "LOITERWATCH_INACTIVE_AIRCRAFT_SECONDS", 900.0
    )

    # Loitering events
    event_inactivity_seconds: float = _get_float("LOITERWATCH_EVENT_INACTIVITY_SECONDS", 600.0)
    event_retention_days: int = int(os.getenv("LOITERWATCH_EVENT_RETENTION_DAYS", "7"))
    event_expiry_interval_seconds: float = _get_float(
        "LOITERWATCH_EVENT_EXPIRY_INTERVAL_SECONDS", 3600.0
    )
    event_track_max_points: int = int(os.getenv("LOITERWATCH_EVENT_TRACK_MAX_POINTS", "500"))

    # Coastline data
    coastline_path: str = os.getenv(
        "LOITERWATCH_COASTLINE_PATH", "data/countries-coastline-2km5.geo.json"
    )

    # Snapshot persistence
    snapshot_backend: str = os.getenv("LOITERWATCH_SNAPSHOT_BACKEND", "json")
    snapshot_dir: str = os.getenv("LOITERWATCH_SNAPSHOT_DIR", "./snapshots")
    snapshot_interval_seconds: float = _get_float(
        "LOITERWATCH_SNAPSHOT_INTERVAL_SECONDS", 60.0
    )

    # Notifications
    telegram_enabled: bool = _get_bool("LOITERWATCH_TELEGRAM_ENABLED", False)
    telegram_bot_token: str = os.getenv("LOITERWATCH_TELEGRAM_BOT_TOKEN", "")
    telegram_chat_id: str = os.getenv("LOITERWATCH_TELEGRAM_CHAT_ID", "")
    telegram_api_base: str = os.getenv(
        "LOITERWATCH_TELEGRAM_API_BASE", "https://api.telegram.org"
    )
    public_base_url: str = os.getenv("LOITERWATCH_PUBLIC_BASE_URL", "http://localhost:3872")


settings = Settings()


def build_monitoring_area(config: Settings) -> MonitoringArea:
    """Monitoring area from flat settings; the built-in ring is optional."""

    return MonitoringArea(
        bounds=BoundingBox(
            min_lat=config.area_min_lat,
            max_lat=config.area_max_lat,
            min_lon=config.area_min_lon,
            max_lon=config.area_max_lon,
        ),
        polygon=CENTRAL_MED_POLYGON if config.area_use_polygon else None,
        name=config.area_name,
    )


def build_thresholds(config: Settings) -> Thresholds:
    return Thresholds(
        altitude=Range(min=config.altitude_min_ft, max=config.altitude_max_ft),
        speed=Range(min=config.speed_min_kt, max=config.speed_max_kt),
        coast_min_distance_km=config.coast_min_distance_km,
        loitering=LoiteringThresholds(
            max_radius_km=config.loiter_max_radius_km,
            min_duration_s=config.loiter_min_duration_s,
        ),
    )


def resolve_telegram_token(config: Settings) -> str | None:
    """Bot token from the environment, falling back to SSM."""

    if config.telegram_bot_token:
        return config.telegram_bot_token
    try:
        return get_telegram_bot_token()
    except RuntimeError:
        logger.warning("Telegram bot token not available; notifications disabled")
        return None


__all__ = [
    "Settings",
    "build_monitoring_area",
    "build_thresholds",
    "get_telegram_bot_token",
    "resolve_telegram_token",
    "settings",
]
