from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple, Union

import typer

from models.outcomes import SensorError, ServiceUnreachable
from services.display import DEFAULT_COLOR, DisplayTarget
from services.pipeline import PipelineRun

Color = Union[str, Tuple[int, int, int]]

_LABELS = (
    (DisplayTarget.latitude, None),
    (DisplayTarget.longitude, None),
    (DisplayTarget.poi_name, "place"),
    (DisplayTarget.server_date, "date"),
    (DisplayTarget.server_time, "time"),
    (DisplayTarget.level, "congestion"),
    (DisplayTarget.status, "status"),
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def terminal_color(color: Optional[str]) -> Optional[Color]:
    """Translate ``#RRGGBB`` into an RGB tuple click understands."""
    if not color or color == DEFAULT_COLOR:
        return None
    if color.startswith("#") and len(color) == 7:
        return tuple(int(color[i : i + 2], 16) for i in (1, 3, 5))  # type: ignore[return-value]
    return color


class TerminalDisplay:
    """Display sink that prints the status board and an in-place counter."""

    def __init__(self) -> None:
        self.texts: Dict[DisplayTarget, str] = {}
        self.colors: Dict[DisplayTarget, str] = {}
        self.blinking: Dict[DisplayTarget, bool] = {}

    def write_text(self, target: DisplayTarget, text: str) -> None:
        self.texts[target] = text
        if target == DisplayTarget.percentage:
            typer.echo(f"\rdensity: {text}", nl=False)

    def set_color(self, target: DisplayTarget, color: str) -> None:
        self.colors[target] = color

    def set_blink(self, target: DisplayTarget, enabled: bool) -> None:
        self.blinking[target] = enabled

    def show_board(self) -> None:
        echo_heading("Realtime Congestion")
        for target, label in _LABELS:
            text = self.texts.get(target)
            if text is None:
                continue
            if label is None:
                typer.echo(text)
                continue
            typer.echo(f"{label}: ", nl=False)
            typer.secho(
                text,
                fg=terminal_color(self.colors.get(target)),
                blink=self.blinking.get(target, False),
            )

    def finish(self) -> None:
        typer.echo()


def render_outcome(run: PipelineRun) -> None:
    if run.result is not None:
        return
    echo_heading("Realtime Congestion")
    pairs: list[tuple[str, Any]] = [("status", run.status.value)]
    if run.coordinates is not None:
        pairs.append(("coordinates", f"{run.coordinates.latitude}, {run.coordinates.longitude}"))
    if run.poi is not None:
        pairs.append(("place", run.poi.name))
    failure = run.failure
    if isinstance(failure, SensorError):
        pairs.append(("error", f"({failure.code}) {failure.message}"))
    elif isinstance(failure, ServiceUnreachable):
        pairs.append(("error", f"code: {failure.status} {failure.detail}"))
    echo_key_values(pairs)
