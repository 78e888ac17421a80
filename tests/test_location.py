from __future__ import annotations

import asyncio
import logging

from models.outcomes import SensorError
from models.records import Coordinates
from services.location import (
    PERMISSION_DENIED,
    CoordinateSource,
    PositionSensorError,
    StaticSensor,
)

DEFAULT = Coordinates(latitude=37.5665, longitude=126.9780)


class FailingSensor:
    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message

    async def locate(self) -> Coordinates:
        raise PositionSensorError(self.code, self.message)


def test_missing_sensor_falls_back_to_default() -> None:
    source = CoordinateSource(default=DEFAULT)

    assert asyncio.run(source.resolve()) == DEFAULT
    assert source.uses_fallback is True


def test_sensor_position_is_used() -> None:
    here = Coordinates(latitude=35.1796, longitude=129.0756)
    source = CoordinateSource(default=DEFAULT, sensor=StaticSensor(here))

    assert asyncio.run(source.resolve()) == here
    assert source.uses_fallback is False


def test_sensor_error_is_returned_without_fallback(caplog) -> None:
    source = CoordinateSource(default=DEFAULT, sensor=FailingSensor(PERMISSION_DENIED, "User denied Geolocation"))

    with caplog.at_level(logging.WARNING, logger="services.location"):
        outcome = asyncio.run(source.resolve())

    assert outcome == SensorError(code=PERMISSION_DENIED, message="User denied Geolocation")
    record = next(r for r in caplog.records if r.name == "services.location")
    assert record.code == PERMISSION_DENIED
    assert record.detail == "User denied Geolocation"
