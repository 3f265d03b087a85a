"""Synthetic fallback series."""

from __future__ import annotations

import random

from power_monitor.feed.base import SeriesPair, ValidatedSample, ValidatedSeries
from power_monitor.telemetry.conversion import TICK_SECONDS
from power_monitor.time_utils import format_time_from_seconds

FULL_DAY_SAMPLES = 24 * 60 * (60 // TICK_SECONDS)  # 17280

POWER_MIN_MW = 54.5
POWER_SPAN_MW = 1.5
TEMP_MIN_DK = 2920.0
TEMP_SPAN_DK = 10.0


def generate_synthetic_series(
    rng: random.Random | None = None,
    sample_count: int = FULL_DAY_SAMPLES,
) -> SeriesPair:
    """A full day of plausible samples, one every tick from 00:00:00.

    Power is uniform in [54.5, 56.0) MW and temperature uniform in
    [2920, 2930) dK.
    """
    rng = rng or random.Random()
    power = []
    temperature = []
    for i in range(sample_count):
        time = format_time_from_seconds(i * TICK_SECONDS)
        power.append(ValidatedSample(time, POWER_MIN_MW + rng.random() * POWER_SPAN_MW))
        temperature.append(ValidatedSample(time, TEMP_MIN_DK + rng.random() * TEMP_SPAN_DK))

    return SeriesPair(
        power=ValidatedSeries(unit="MW", values=tuple(power)),
        temperature=ValidatedSeries(unit="dK", values=tuple(temperature)),
    )
