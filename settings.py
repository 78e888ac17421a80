from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache


_APP_KEY_ENV = "CONGESTION_APP_KEY"
_GEOCODE_URL_ENV = "REVERSE_GEOCODE_URL"
_CONGESTION_URL_ENV = "CONGESTION_URL"
_MAX_RATIO_ENV = "CONGESTION_MAX_RATIO"
_DEFAULT_LAT_ENV = "DEFAULT_LATITUDE"
_DEFAULT_LON_ENV = "DEFAULT_LONGITUDE"
_DURATION_ENV = "ANIMATION_DURATION_MS"
_TICK_ENV = "ANIMATION_TICK_MS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_GEOCODE_URL = "https://apis.openapi.sk.com/tmap/geo/reverseLabel"
DEFAULT_CONGESTION_URL = "https://apis.openapi.sk.com/puzzle/place/congestion/rltm/pois"


@dataclass(frozen=True)
class Settings:
    app_key: str
    reverse_geocode_url: str
    congestion_url: str
    max_ratio: float
    default_latitude: float
    default_longitude: float
    animation_duration_ms: int
    animation_tick_ms: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_float_env(name: str, default: float, positive: bool = False) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if not math.isfinite(parsed):
        return default
    if positive and parsed <= 0:
        return default
    return parsed


def _read_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        app_key=_read_str_env(_APP_KEY_ENV, ""),
        reverse_geocode_url=_read_str_env(_GEOCODE_URL_ENV, DEFAULT_GEOCODE_URL),
        congestion_url=_read_str_env(_CONGESTION_URL_ENV, DEFAULT_CONGESTION_URL).rstrip("/"),
        max_ratio=_read_float_env(_MAX_RATIO_ENV, 0.4, positive=True),
        default_latitude=_read_float_env(_DEFAULT_LAT_ENV, 37.5665),
        default_longitude=_read_float_env(_DEFAULT_LON_ENV, 126.9780),
        animation_duration_ms=_read_int_env(_DURATION_ENV, 2000),
        animation_tick_ms=_read_int_env(_TICK_ENV, 20),
        log_level=_read_log_level("INFO"),
    )
