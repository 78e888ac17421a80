from __future__ import annotations

import asyncio

import httpx

from models.outcomes import NotFound, RunStatus, SensorError, ServiceUnreachable, Unsupported
from models.records import Coordinates
from services.display import DisplayTarget, MemoryDisplay
from services.location import TIMEOUT, CoordinateSource, PositionSensorError, StaticSensor
from services.pipeline import PipelineRun, build_default_pipeline, build_pipeline
from settings import Settings
from tests.fakes import FakeServices, congestion_payload, make_pipeline, realtime_entry

DEFAULT = Coordinates(latitude=37.5665, longitude=126.9780)


class TimedOutSensor:
    async def locate(self) -> Coordinates:
        raise PositionSensorError(TIMEOUT, "Timeout expired")


def _run(services: FakeServices, source: CoordinateSource, display: MemoryDisplay | None = None) -> PipelineRun:
    pipeline = make_pipeline(services, display)

    async def scenario() -> PipelineRun:
        run = await pipeline.run(source)
        if run.animation is not None:
            await run.animation
        return run

    return asyncio.run(scenario())


def test_default_coordinates_end_to_end() -> None:
    display = MemoryDisplay()
    services = FakeServices()

    run = _run(services, CoordinateSource(default=DEFAULT), display)

    assert run.status == RunStatus.displayed
    assert run.coordinates == DEFAULT
    assert run.poi is not None and run.poi.name == "CityHall"
    assert run.result is not None
    assert run.result.percentage == 75.0
    assert run.result.level_label == "congested"
    assert run.result.status_label == "caution"
    assert display.texts[DisplayTarget.latitude] == "Latitude: 37.5665"
    assert display.texts[DisplayTarget.poi_name] == "CityHall"
    assert display.texts[DisplayTarget.server_date] == "July 3, 2024"
    assert display.texts[DisplayTarget.server_time] == "7:05:00 AM"
    assert display.texts[DisplayTarget.level] == "congested"
    assert display.texts[DisplayTarget.status] == "caution"
    assert display.blinking[DisplayTarget.status] is True
    assert display.texts[DisplayTarget.percentage] == "75.00%"
    assert [request.url.host for request in services.requests] == ["geo.test", "puzzle.test"]


def test_unsupported_location_halts_without_display_writes() -> None:
    display = MemoryDisplay()
    services = FakeServices(congestion=congestion_payload(realtime_entry(type_=1)))
    source = CoordinateSource(default=DEFAULT, sensor=StaticSensor(DEFAULT))

    run = _run(services, source, display)

    assert run.status == RunStatus.unsupported
    assert run.failure == Unsupported()
    assert run.result is None
    assert run.animation is None
    assert display.history == []
    assert display.colors == {}
    assert display.blinking == {}


def test_default_position_writes_nothing_when_location_is_unsupported() -> None:
    display = MemoryDisplay()
    services = FakeServices(congestion=congestion_payload(realtime_entry(type_=1)))

    run = _run(services, CoordinateSource(default=DEFAULT), display)

    assert run.status == RunStatus.unsupported
    assert run.used_fallback is True
    assert display.history == []


def test_default_position_writes_nothing_when_poi_is_missing() -> None:
    display = MemoryDisplay()
    services = FakeServices(geocode={"poiInfo": None})

    run = _run(services, CoordinateSource(default=DEFAULT), display)

    assert run.status == RunStatus.not_found
    assert display.history == []


def test_sensor_position_is_not_written_on_success() -> None:
    display = MemoryDisplay()

    run = _run(FakeServices(), CoordinateSource(default=DEFAULT, sensor=StaticSensor(DEFAULT)), display)

    assert run.status == RunStatus.displayed
    assert run.used_fallback is False
    assert DisplayTarget.latitude not in display.texts
    assert display.texts[DisplayTarget.poi_name] == "CityHall"


def test_sensor_error_halts_before_any_request() -> None:
    services = FakeServices()

    run = _run(services, CoordinateSource(default=DEFAULT, sensor=TimedOutSensor()))

    assert run.status == RunStatus.sensor_error
    assert run.failure == SensorError(code=TIMEOUT, message="Timeout expired")
    assert run.coordinates is None
    assert services.requests == []


def test_missing_poi_halts_before_congestion_lookup() -> None:
    services = FakeServices(geocode={"poiInfo": None})

    run = _run(services, CoordinateSource(default=DEFAULT))

    assert run.status == RunStatus.not_found
    assert run.failure == NotFound()
    assert len(services.requests) == 1


def test_congestion_service_failure_keeps_poi() -> None:
    services = FakeServices(congestion=httpx.Response(503, text="busy"))

    run = _run(services, CoordinateSource(default=DEFAULT))

    assert run.status == RunStatus.service_unreachable
    assert isinstance(run.failure, ServiceUnreachable)
    assert run.failure.status == 503
    assert run.poi is not None


def test_invalid_timestamp_still_renders() -> None:
    display = MemoryDisplay()
    services = FakeServices(congestion=congestion_payload(realtime_entry(congestion=0.2, level=2, timestamp="2024")))

    run = _run(services, CoordinateSource(default=DEFAULT, sensor=StaticSensor(DEFAULT)), display)

    assert run.status == RunStatus.displayed
    assert display.texts[DisplayTarget.server_date] == "Invalid date format"
    assert display.texts[DisplayTarget.server_time] == "Invalid date format"
    assert display.texts[DisplayTarget.percentage] == "50.00%"
    assert display.blinking[DisplayTarget.status] is False


def test_pipeline_without_animator_only_classifies() -> None:
    run = _run(FakeServices(), CoordinateSource(default=DEFAULT))

    assert run.status == RunStatus.displayed
    assert run.animation is None
    assert run.result is not None


def test_build_pipeline_uses_settings(test_settings: Settings) -> None:
    pipeline = build_pipeline(test_settings)
    try:
        assert pipeline.geocoder.url == test_settings.reverse_geocode_url
        assert pipeline.congestion.base_url == test_settings.congestion_url
        assert pipeline.classifier.max_ratio == 0.4
        assert pipeline.animator is None
    finally:
        asyncio.run(pipeline.close())


def test_default_pipeline_is_cached() -> None:
    build_default_pipeline.cache_clear()
    try:
        assert build_default_pipeline() is build_default_pipeline()
    finally:
        asyncio.run(build_default_pipeline().close())
        build_default_pipeline.cache_clear()
