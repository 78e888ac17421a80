"""Sequential orchestration of the location-to-congestion lookups."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from models.outcomes import (
    RunStatus,
    SensorError,
    ServiceUnreachable,
    StageFailure,
    status_for,
)
from models.records import (
    ClassificationResult,
    CongestionSample,
    Coordinates,
    PointOfInterest,
)
from services.classifier import CongestionClassifier
from services.congestion import CongestionClient
from services.display import DisplayAnimator
from services.geocoding import ReverseGeocodingClient
from services.location import CoordinateSource
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class PipelineRun:
    """Everything one run produced, up to the stage where it stopped."""

    status: RunStatus
    coordinates: Optional[Coordinates] = None
    poi: Optional[PointOfInterest] = None
    sample: Optional[CongestionSample] = None
    result: Optional[ClassificationResult] = None
    failure: Optional[StageFailure] = None
    used_fallback: bool = False
    animation: Optional[asyncio.Task[None]] = None


class CongestionPipeline:
    """Runs each stage only after the previous one succeeded."""

    def __init__(
        self,
        geocoder: ReverseGeocodingClient,
        congestion: CongestionClient,
        classifier: CongestionClassifier,
        animator: Optional[DisplayAnimator] = None,
    ) -> None:
        self.geocoder = geocoder
        self.congestion = congestion
        self.classifier = classifier
        self.animator = animator

    async def run(self, source: CoordinateSource) -> PipelineRun:
        coordinates = await source.resolve()
        if isinstance(coordinates, SensorError):
            return self._halt(PipelineRun(status=status_for(coordinates)), coordinates)

        run = PipelineRun(
            status=RunStatus.displayed,
            coordinates=coordinates,
            used_fallback=source.uses_fallback,
        )
        poi = await self.geocoder.reverse_geocode(coordinates)
        if not isinstance(poi, PointOfInterest):
            return self._halt(run, poi)
        run.poi = poi

        sample = await self.congestion.fetch_congestion(poi, coordinates)
        if not isinstance(sample, CongestionSample):
            return self._halt(run, sample)
        run.sample = sample

        run.result = self.classifier.classify(sample)
        if self.animator is not None:
            # fallback coordinates are only shown once there is a result to show
            if run.used_fallback:
                self.animator.show_coordinates(coordinates)
            run.animation = self.animator.render(run.result, sample.poi_name or poi.name)
        logger.info("Congestion status rendered", extra={"run_status": run.status.value})
        return run

    async def close(self) -> None:
        await self.geocoder.close()
        await self.congestion.close()

    @staticmethod
    def _halt(run: PipelineRun, failure: StageFailure) -> PipelineRun:
        run.status = status_for(failure)
        run.failure = failure
        log = logger.warning if isinstance(failure, (SensorError, ServiceUnreachable)) else logger.info
        log("Pipeline halted", extra={"run_status": run.status.value})
        return run


def build_pipeline(
    settings: Settings, animator: Optional[DisplayAnimator] = None
) -> CongestionPipeline:
    """Wire a pipeline from explicit settings."""
    return CongestionPipeline(
        geocoder=ReverseGeocodingClient(settings.reverse_geocode_url, settings.app_key),
        congestion=CongestionClient(settings.congestion_url, settings.app_key),
        classifier=CongestionClassifier(settings.max_ratio),
        animator=animator,
    )


@lru_cache
def build_default_pipeline() -> CongestionPipeline:
    """Factory that wires a display-less pipeline from environment settings."""
    return build_pipeline(get_settings())


def default_coordinates(settings: Settings) -> Coordinates:
    return Coordinates(latitude=settings.default_latitude, longitude=settings.default_longitude)
