"""Tests for wall-clock helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from power_monitor.time_utils import (
    format_clock,
    format_hms,
    format_time_from_seconds,
    local_now,
    resolve_timezone,
)


class TestResolveTimezone:
    def test_utc(self) -> None:
        assert datetime(2023, 1, 1, tzinfo=resolve_timezone("UTC")).utcoffset().total_seconds() == 0

    def test_empty_name_is_host_local(self) -> None:
        assert resolve_timezone("") == datetime.now().astimezone().tzinfo

    def test_unknown_name_falls_back_to_local(self) -> None:
        assert resolve_timezone("Nowhere/Special") == datetime.now().astimezone().tzinfo

    def test_local_now_is_aware(self) -> None:
        assert local_now("UTC").tzinfo is not None


class TestFormatting:
    def test_seconds_since_midnight(self) -> None:
        assert format_time_from_seconds(0) == "00:00:00"
        assert format_time_from_seconds(36005) == "10:00:05"
        assert format_time_from_seconds(86399) == "23:59:59"

    def test_clock_and_hms(self) -> None:
        now = datetime(2023, 1, 1, 9, 5, 3, tzinfo=timezone.utc)
        assert format_clock(now) == "Sunday, 01 January 2023 09:05:03"
        assert format_hms(now) == "09:05:03"
