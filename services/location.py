"""Coordinate resolution from a position sensor or the configured fallback."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

from models.outcomes import SensorError
from models.records import Coordinates

logger = logging.getLogger(__name__)

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class PositionSensorError(Exception):
    """Raised by a sensor that is present but could not produce a position."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class PositionSensor(Protocol):
    async def locate(self) -> Coordinates:
        ...


class StaticSensor:
    """Sensor that always reports the same position."""

    def __init__(self, coordinates: Coordinates) -> None:
        self._coordinates = coordinates

    async def locate(self) -> Coordinates:
        return self._coordinates


class CoordinateSource:
    """Resolves the requester's position.

    Without a sensor the configured default is used. A sensor that fails is
    not followed by the fallback: the error is logged and handed back so the
    run halts.
    """

    def __init__(
        self,
        default: Coordinates,
        sensor: Optional[PositionSensor] = None,
    ) -> None:
        self.default = default
        self.sensor = sensor

    @property
    def uses_fallback(self) -> bool:
        return self.sensor is None

    async def resolve(self) -> Union[Coordinates, SensorError]:
        if self.sensor is None:
            logger.info(
                "Position sensor unavailable, using default coordinates",
                extra={"latitude": self.default.latitude, "longitude": self.default.longitude},
            )
            return self.default

        try:
            coordinates = await self.sensor.locate()
        except PositionSensorError as exc:
            logger.warning(
                "Position lookup failed",
                extra={"code": exc.code, "detail": exc.message},
            )
            return SensorError(code=exc.code, message=exc.message)

        logger.info(
            "Current location resolved",
            extra={"latitude": coordinates.latitude, "longitude": coordinates.longitude},
        )
        return coordinates

