"""Display targets, color coding and the animated status renderer."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Tuple

from models.records import ClassificationResult, Coordinates

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "black"

LEVEL_COLORS: Mapping[str, str] = {
    "light": "#1D64F2",
    "moderate": "#BFF207",
    "congested": "#F2A950",
    "very congested": "#F24822",
}

STATUS_COLORS: Mapping[str, str] = {
    "safe": "#1D64F2",
    "normal": "#BFF207",
    "caution": "#F2A950",
    "danger": "#F24822",
}

BLINKING_STATUSES = frozenset({"caution", "danger"})


class DisplayTarget(str, Enum):
    latitude = "latitude"
    longitude = "longitude"
    poi_name = "loc_main"
    server_date = "server_date"
    server_time = "server_time"
    level = "density_stage"
    status = "status"
    percentage = "density_val"


class DisplaySink(Protocol):
    def write_text(self, target: DisplayTarget, text: str) -> None:
        ...

    def set_color(self, target: DisplayTarget, color: str) -> None:
        ...

    def set_blink(self, target: DisplayTarget, enabled: bool) -> None:
        ...


@dataclass
class MemoryDisplay:
    """Display sink that keeps the latest state of every target in memory."""

    texts: Dict[DisplayTarget, str] = field(default_factory=dict)
    colors: Dict[DisplayTarget, str] = field(default_factory=dict)
    blinking: Dict[DisplayTarget, bool] = field(default_factory=dict)
    history: List[Tuple[DisplayTarget, str]] = field(default_factory=list)

    def write_text(self, target: DisplayTarget, text: str) -> None:
        self.texts[target] = text
        self.history.append((target, text))

    def set_color(self, target: DisplayTarget, color: str) -> None:
        self.colors[target] = color

    def set_blink(self, target: DisplayTarget, enabled: bool) -> None:
        self.blinking[target] = enabled

    def writes_to(self, target: DisplayTarget) -> List[str]:
        return [text for written, text in self.history if written == target]


def color_for_level(label: str) -> str:
    return LEVEL_COLORS.get(label, DEFAULT_COLOR)


def color_for_status(label: str) -> str:
    return STATUS_COLORS.get(label, DEFAULT_COLOR)


def should_blink(status: str) -> bool:
    return status in BLINKING_STATUSES


Sleep = Callable[[float], Awaitable[None]]


class DisplayAnimator:
    """Writes classification results and animates the percentage counter."""

    def __init__(
        self,
        display: DisplaySink,
        duration_ms: int = 2000,
        tick_ms: int = 20,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if duration_ms <= 0 or tick_ms <= 0:
            raise ValueError("Animation duration and tick must be positive.")
        self.display = display
        self.duration_ms = duration_ms
        self.tick_ms = tick_ms
        self._sleep = sleep

    @property
    def tick_count(self) -> int:
        return max(1, math.ceil(self.duration_ms / self.tick_ms))

    def show_coordinates(self, coordinates: Coordinates) -> None:
        self.display.write_text(DisplayTarget.latitude, f"Latitude: {coordinates.latitude}")
        self.display.write_text(DisplayTarget.longitude, f"Longitude: {coordinates.longitude}")

    def render(self, result: ClassificationResult, poi_name: str) -> asyncio.Task[None]:
        """Write every label target and start the counter animation.

        Must be called from a running event loop. The returned task finishes
        once the counter shows the exact target value.
        """
        display = self.display
        display.write_text(DisplayTarget.poi_name, poi_name)
        display.write_text(DisplayTarget.server_date, result.display_date)
        display.write_text(DisplayTarget.server_time, result.display_time)
        display.write_text(DisplayTarget.level, result.level_label)
        display.write_text(DisplayTarget.status, result.status_label)
        display.set_color(DisplayTarget.level, color_for_level(result.level_label))
        display.set_color(DisplayTarget.status, color_for_status(result.status_label))
        display.set_blink(DisplayTarget.status, should_blink(result.status_label))
        return asyncio.create_task(self.animate(result.percentage))

    async def animate(self, target: float) -> None:
        increment = target / (self.duration_ms / self.tick_ms)
        current = 0.0
        ticks = 0
        while True:
            await self._sleep(self.tick_ms / 1000)
            ticks += 1
            current += increment
            done = current >= target or ticks >= self.tick_count
            if done:
                current = target
            self._write_value(current)
            if done:
                return

    def _write_value(self, value: Optional[float]) -> None:
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            logger.error("Percentage is not a number", extra={"value": value})
            return
        self.display.write_text(DisplayTarget.percentage, f"{value:.2f}%")
