"""Derived telemetry sample model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DerivedSample:
    """One converted, display-unit data point of the sliding window."""

    timestamp_ms: int  # Unix epoch milliseconds of the sampling tick
    display_time: str  # HH:MM:SS wall-clock time of the tick
    power_kwh: float  # Energy over one tick
    temp_celsius: float
    feed_time: str = ""  # HH:MM:SS time label of the feed sample used
