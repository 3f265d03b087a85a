"""Raw feed document to validated, index-aligned series."""

from __future__ import annotations

import logging
import math
from typing import Any

from power_monitor.feed.base import (
    DEFAULT_TIME,
    NoUsableDataError,
    RawSeries,
    RawSeriesDoc,
    SeriesPair,
    ValidatedSample,
    ValidatedSeries,
)

logger = logging.getLogger(__name__)


def coerce_value(raw: Any) -> float | None:
    """Numeric value of a raw sample, or None when it is not a finite number."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def validate_series(name: str, series: RawSeries) -> ValidatedSeries:
    """Drop every sample whose value is not a finite number."""
    kept = []
    for sample in series.values:
        value = coerce_value(sample.value)
        if value is None:
            logger.warning("Invalid %s value: %r", name, sample.value)
            continue
        kept.append(ValidatedSample(time=sample.time or DEFAULT_TIME, value=value))
    return ValidatedSeries(unit=series.unit, values=tuple(kept))


def normalize_series(doc: RawSeriesDoc) -> SeriesPair:
    """Validate both series and truncate them to a shared length.

    Truncation keeps power and temperature index-aligned even when one of
    them lost more samples than the other.

    Raises:
        NoUsableDataError: no sample index is valid in both series.
    """
    power = validate_series("power", doc.power)
    temperature = validate_series("temperature", doc.temperature)

    length = min(len(power), len(temperature))
    if length == 0:
        raise NoUsableDataError(
            f"no usable samples (power={len(power)}, temperature={len(temperature)})"
        )

    if len(power) != len(temperature):
        logger.info(
            "Truncating series to %d samples (power=%d, temperature=%d)",
            length,
            len(power),
            len(temperature),
        )

    return SeriesPair(
        power=ValidatedSeries(unit=power.unit, values=power.values[:length]),
        temperature=ValidatedSeries(unit=temperature.unit, values=temperature.values[:length]),
    )
