"""YAML feed document parser.

Expected layout::

    power:
      unit: MW
      values:
        - time: '00:00:00'
          value: 50.0
    temperature:
      unit: dK
      values:
        - time: '00:00:00'
          value: 2931
"""

from __future__ import annotations

from typing import Any

import yaml

from power_monitor.feed.base import (
    DEFAULT_TIME,
    FeedParseError,
    RawSample,
    RawSeries,
    RawSeriesDoc,
)
from power_monitor.time_utils import format_time_from_seconds

_DEFAULT_UNITS = {"power": "MW", "temperature": "dK"}


def parse_series(text: str) -> RawSeriesDoc:
    """Parse raw feed text into a RawSeriesDoc.

    Values are left untouched; numeric validation is the normalizer's job.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FeedParseError(f"malformed YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise FeedParseError(f"expected a mapping at top level, got {type(data).__name__}")

    return RawSeriesDoc(
        power=_parse_section(data, "power"),
        temperature=_parse_section(data, "temperature"),
    )


def _parse_section(data: dict[str, Any], name: str) -> RawSeries:
    section = data.get(name)
    if not isinstance(section, dict):
        raise FeedParseError(f"missing or invalid '{name}' section")

    raw_values = section.get("values")
    if raw_values is None:
        raw_values = []
    if not isinstance(raw_values, list):
        raise FeedParseError(f"'{name}.values' must be a list")

    samples = []
    for position, entry in enumerate(raw_values):
        if not isinstance(entry, dict):
            raise FeedParseError(f"'{name}.values[{position}]' must be a mapping")
        samples.append(RawSample(time=_parse_time(entry.get("time")), value=entry.get("value")))

    unit = section.get("unit") or _DEFAULT_UNITS[name]
    return RawSeries(unit=str(unit), values=tuple(samples))


def _parse_time(raw: Any) -> str:
    if raw is None or raw == "":
        return DEFAULT_TIME
    # YAML 1.1 reads unquoted 00:00:05 as a base-60 integer
    if isinstance(raw, int) and not isinstance(raw, bool):
        return format_time_from_seconds(raw)
    return str(raw)
