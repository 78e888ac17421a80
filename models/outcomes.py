"""Terminal stage outcomes returned in place of a success payload.

Stages never raise these; they hand them back to the pipeline, which logs and
halts. ``NotFound`` and ``Unsupported`` are normal outcomes, the others are
failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True, slots=True)
class SensorError:
    code: int
    message: str


@dataclass(frozen=True, slots=True)
class ServiceUnreachable:
    status: Optional[int]
    body: str
    detail: str


@dataclass(frozen=True, slots=True)
class NotFound:
    """The coordinates resolved to no point of interest."""


@dataclass(frozen=True, slots=True)
class Unsupported:
    """The point of interest has no realtime occupancy sample."""


StageFailure = Union[SensorError, ServiceUnreachable, NotFound, Unsupported]


class RunStatus(str, Enum):
    """How a single pipeline run ended."""

    displayed = "displayed"
    sensor_error = "sensor_error"
    not_found = "not_found"
    unsupported = "unsupported"
    service_unreachable = "service_unreachable"


def status_for(outcome: StageFailure) -> RunStatus:
    if isinstance(outcome, SensorError):
        return RunStatus.sensor_error
    if isinstance(outcome, NotFound):
        return RunStatus.not_found
    if isinstance(outcome, Unsupported):
        return RunStatus.unsupported
    return RunStatus.service_unreachable
