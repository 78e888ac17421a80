"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A WGS84 position produced once per pipeline run."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class PointOfInterest:
    """A named location returned by reverse geocoding."""

    id: str
    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class CongestionSample:
    """The realtime occupancy entry selected from a congestion response.

    ``level`` and ``timestamp_raw`` hold whatever the service sent; the
    classifier resolves unusable values to its defaults.
    """

    congestion_ratio: float
    level: Any
    timestamp_raw: Any
    poi_name: str = ""


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Display-ready values derived from a single congestion sample."""

    percentage: float
    level_label: str
    status_label: str
    display_date: str
    display_time: str
