"""Tests for the YAML feed parser."""

from __future__ import annotations

import pytest

from power_monitor.feed.base import FeedParseError
from power_monitor.feed.parser import parse_series


class TestParseSeries:
    def test_parses_both_series(self, feed_text: str) -> None:
        doc = parse_series(feed_text)
        assert doc.power.unit == "MW"
        assert doc.temperature.unit == "dK"
        assert [s.value for s in doc.power.values] == [50.0, 51.2]
        assert [s.time for s in doc.temperature.values] == ["00:00:00", "00:00:05"]

    def test_values_are_not_validated(self) -> None:
        doc = parse_series(
            "power:\n  values:\n    - {time: '00:00:00', value: invalid}\n"
            "temperature:\n  values: []\n"
        )
        assert doc.power.values[0].value == "invalid"

    def test_unquoted_time_is_rendered_back(self) -> None:
        # YAML 1.1 reads unquoted 10:00:05 as the base-60 integer 36005
        doc = parse_series(
            "power:\n  values:\n    - time: 10:00:05\n      value: 1\n"
            "temperature:\n  values:\n    - time: 10:00:05\n      value: 2\n"
        )
        assert doc.power.values[0].time == "10:00:05"

    def test_missing_time_defaults_to_midnight(self) -> None:
        doc = parse_series("power:\n  values:\n    - value: 1\ntemperature:\n  values: []\n")
        assert doc.power.values[0].time == "00:00:00"

    def test_default_units(self) -> None:
        doc = parse_series("power: { values: [] }\ntemperature: { values: [] }")
        assert doc.power.unit == "MW"
        assert doc.temperature.unit == "dK"
        assert doc.power.values == ()

    def test_section_without_values_is_empty(self) -> None:
        doc = parse_series("power: {unit: MW}\ntemperature: {unit: dK}")
        assert doc.power.values == ()

    @pytest.mark.parametrize(
        "text",
        [
            "power: [unclosed",
            "just a string",
            "power: {values: []}",
            "power: {values: 3}\ntemperature: {values: []}",
            "power: {values: [1, 2]}\ntemperature: {values: []}",
        ],
    )
    def test_malformed_documents_raise(self, text: str) -> None:
        with pytest.raises(FeedParseError):
            parse_series(text)
