"""HTTP route definitions for the service."""

from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    ClassificationModel,
    CongestionStatusResponse,
    CoordinatesModel,
    FailureModel,
    PointOfInterestModel,
)
from models.outcomes import SensorError, ServiceUnreachable
from models.records import Coordinates
from services.display import color_for_level, color_for_status, should_blink
from services.location import CoordinateSource, StaticSensor
from services.pipeline import (
    CongestionPipeline,
    PipelineRun,
    build_default_pipeline,
    default_coordinates,
)
from settings import get_settings

router = APIRouter()


def get_pipeline() -> CongestionPipeline:
    return build_default_pipeline()


def _to_response(run: PipelineRun) -> CongestionStatusResponse:
    response = CongestionStatusResponse(status=run.status)
    if run.coordinates is not None:
        response.coordinates = CoordinatesModel(
            latitude=run.coordinates.latitude, longitude=run.coordinates.longitude
        )
    if run.poi is not None:
        response.poi = PointOfInterestModel(
            id=run.poi.id,
            name=run.poi.name,
            latitude=run.poi.latitude,
            longitude=run.poi.longitude,
        )
    if run.result is not None and run.sample is not None:
        result = run.result
        response.congestion = ClassificationModel(
            poi_name=run.sample.poi_name,
            percentage=result.percentage if math.isfinite(result.percentage) else None,
            level_label=result.level_label,
            status_label=result.status_label,
            level_color=color_for_level(result.level_label),
            status_color=color_for_status(result.status_label),
            blink=should_blink(result.status_label),
            display_date=result.display_date,
            display_time=result.display_time,
        )
    if isinstance(run.failure, SensorError):
        response.failure = FailureModel(code=run.failure.code, detail=run.failure.message)
    elif isinstance(run.failure, ServiceUnreachable):
        response.failure = FailureModel(status=run.failure.status, detail=run.failure.detail)
    return response


@router.get(
    "/congestion",
    response_model=CongestionStatusResponse,
    summary="Resolve a position to a nearby place and classify its realtime congestion.",
)
async def get_congestion(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Requester latitude."),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Requester longitude."),
    pipeline: CongestionPipeline = Depends(get_pipeline),
) -> CongestionStatusResponse:
    if (lat is None) != (lon is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both lat and lon must be provided together.",
        )
    sensor = None
    if lat is not None and lon is not None:
        sensor = StaticSensor(Coordinates(latitude=lat, longitude=lon))
    source = CoordinateSource(default=default_coordinates(get_settings()), sensor=sensor)
    run = await pipeline.run(source)
    return _to_response(run)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
