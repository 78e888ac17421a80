from __future__ import annotations

import pytest

from settings import Settings
from tests.fakes import CONGESTION_URL, GEOCODE_URL


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        app_key="test-key",
        reverse_geocode_url=GEOCODE_URL,
        congestion_url=CONGESTION_URL,
        max_ratio=0.4,
        default_latitude=37.5665,
        default_longitude=126.9780,
        animation_duration_ms=10,
        animation_tick_ms=1,
        log_level="INFO",
    )
