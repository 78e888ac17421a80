from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import typer

from cli.render import TerminalDisplay, render_outcome
from logging_config import configure_logging
from models.records import Coordinates
from services.display import DisplayAnimator
from services.location import CoordinateSource, StaticSensor
from services.pipeline import PipelineRun, build_pipeline, default_coordinates
from settings import Settings, get_settings


@dataclass
class CLIState:
    settings: Settings


app = typer.Typer(
    help="Show the realtime congestion of the place nearest to a position.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    settings = get_settings()
    configure_logging(log_level.upper() if log_level else None)
    ctx.obj = CLIState(settings=settings)


async def _run_status(
    settings: Settings, position: Optional[Coordinates], display: TerminalDisplay
) -> PipelineRun:
    animator = DisplayAnimator(
        display,
        duration_ms=settings.animation_duration_ms,
        tick_ms=settings.animation_tick_ms,
    )
    pipeline = build_pipeline(settings, animator)
    sensor = StaticSensor(position) if position is not None else None
    source = CoordinateSource(default=default_coordinates(settings), sensor=sensor)
    try:
        run = await pipeline.run(source)
        if run.animation is not None:
            display.show_board()
            await run.animation
            display.finish()
        return run
    finally:
        await pipeline.close()


@app.command("status")
def status_command(
    ctx: typer.Context,
    lat: Optional[float] = typer.Option(None, "--lat", min=-90, max=90, help="Latitude."),
    lon: Optional[float] = typer.Option(None, "--lon", min=-180, max=180, help="Longitude."),
) -> None:
    """Resolve a position and display its realtime congestion.

    Without --lat/--lon the configured default position is used.
    """
    state = _get_state(ctx)
    if (lat is None) != (lon is None):
        raise typer.BadParameter("--lat and --lon must be given together.")
    position = Coordinates(latitude=lat, longitude=lon) if lat is not None and lon is not None else None
    run = asyncio.run(_run_status(state.settings, position, TerminalDisplay()))
    render_outcome(run)
