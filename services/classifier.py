"""Classification of raw congestion samples into display values."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Mapping

from models.records import ClassificationResult, CongestionSample

logger = logging.getLogger(__name__)

LEVEL_LABELS: Mapping[int, str] = {
    0: "unknown",
    1: "light",
    2: "moderate",
    3: "congested",
    4: "very congested",
}

STATUS_LABELS: Mapping[int, str] = {
    0: "unknown",
    1: "safe",
    2: "normal",
    3: "caution",
    4: "danger",
}

INVALID_DATE = "Invalid date format"


def _lookup(table: Mapping[int, str], level: Any) -> str:
    # bool is an int subclass but never a valid level
    if isinstance(level, bool) or not isinstance(level, int):
        return table[0]
    return table.get(level, table[0])


def level_label(level: Any) -> str:
    return _lookup(LEVEL_LABELS, level)


def status_label(level: Any) -> str:
    return _lookup(STATUS_LABELS, level)


def congestion_percentage(ratio: float, max_ratio: float) -> float:
    """Scale ``ratio`` against ``max_ratio``; values above the max exceed 100."""
    return round(ratio / max_ratio * 100, 2)


def parse_timestamp(raw: Any) -> datetime:
    """Parse a ``YYYYMMDDHHmmss`` string into a naive local datetime."""
    if not isinstance(raw, str) or len(raw) != 14 or not (raw.isascii() and raw.isdigit()):
        raise ValueError(f"Malformed timestamp {raw!r}")
    candidate = f"{raw[0:4]}-{raw[4:6]}-{raw[6:8]}T{raw[8:10]}:{raw[10:12]}:{raw[12:14]}"
    return datetime.fromisoformat(candidate)


def format_timestamp(raw: Any) -> tuple[str, str]:
    """Return the long-form date and 12-hour time for ``raw``.

    Both fields fall back to ``INVALID_DATE`` when the timestamp cannot be
    parsed; the failure is logged and never raised.
    """
    try:
        parsed = parse_timestamp(raw)
    except ValueError:
        logger.error("Invalid date constructed", extra={"raw_timestamp": raw})
        return INVALID_DATE, INVALID_DATE
    hour = parsed.hour % 12 or 12
    meridiem = "AM" if parsed.hour < 12 else "PM"
    display_date = f"{parsed:%B} {parsed.day}, {parsed.year}"
    display_time = f"{hour}:{parsed:%M:%S} {meridiem}"
    return display_date, display_time


class CongestionClassifier:
    """Pure classification component that can be unit tested in isolation."""

    def __init__(self, max_ratio: float = 0.4) -> None:
        if not math.isfinite(max_ratio) or max_ratio <= 0:
            raise ValueError("max_ratio must be a positive finite number.")
        self.max_ratio = max_ratio

    def classify(self, sample: CongestionSample) -> ClassificationResult:
        display_date, display_time = format_timestamp(sample.timestamp_raw)
        return ClassificationResult(
            percentage=congestion_percentage(sample.congestion_ratio, self.max_ratio),
            level_label=level_label(sample.level),
            status_label=status_label(sample.level),
            display_date=display_date,
            display_time=display_time,
        )
