"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from models.outcomes import RunStatus


class CoordinatesModel(BaseModel):
    latitude: float
    longitude: float


class PointOfInterestModel(BaseModel):
    """Point of interest resolved from the requester's position."""

    id: str
    name: str
    latitude: float
    longitude: float


class ClassificationModel(BaseModel):
    """Display-ready congestion values for a point of interest."""

    poi_name: str
    percentage: Optional[float] = Field(
        None, description="Congestion against the configured maximum; may exceed 100."
    )
    level_label: str
    status_label: str
    level_color: str
    status_color: str
    blink: bool
    display_date: str
    display_time: str


class FailureModel(BaseModel):
    """Details of a failed remote call or sensor lookup."""

    code: Optional[int] = None
    status: Optional[int] = None
    detail: str


class CongestionStatusResponse(BaseModel):
    """Outcome of one location-to-congestion run."""

    status: RunStatus
    coordinates: Optional[CoordinatesModel] = None
    poi: Optional[PointOfInterestModel] = None
    congestion: Optional[ClassificationModel] = None
    failure: Optional[FailureModel] = None
