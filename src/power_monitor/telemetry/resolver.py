"""Wall-clock to sample-index resolution."""

from __future__ import annotations

from datetime import datetime

from power_monitor.telemetry.conversion import TICK_SECONDS


def seconds_today(now: datetime) -> int:
    return now.hour * 3600 + now.minute * 60 + now.second


def resolve_index(now: datetime, series_length: int) -> int:
    """Index of the feed sample that corresponds to ``now``.

    The feed starts at 00:00:00 with one sample every ``TICK_SECONDS``.
    Out-of-range indices (the last seconds of the day, feeds shorter than a
    day) are clamped to the last sample rather than treated as errors.
    """
    if series_length < 1:
        raise ValueError(f"series_length must be >= 1, got {series_length}")
    raw_index = seconds_today(now) // TICK_SECONDS
    return max(0, min(raw_index, series_length - 1))
