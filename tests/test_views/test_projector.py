"""Tests for chart and table projections."""

from __future__ import annotations

import pytest

from power_monitor.telemetry.sample import DerivedSample
from power_monitor.views.projector import Metric, ViewProjector


def _sample(ts: int, time: str, power: float, temp: float) -> DerivedSample:
    return DerivedSample(timestamp_ms=ts, display_time=time, power_kwh=power, temp_celsius=temp)


THREE = [
    _sample(1000, "00:00:01", 10, 20),
    _sample(2000, "00:00:02", 20, 25),
    _sample(3000, "00:00:03", 30, 30),
]


def _window(n: int) -> list[DerivedSample]:
    return [
        _sample(1_700_000_000_000 + i * 5000, f"10:{i // 12:02d}:{(i % 12) * 5:02d}", 70 + i % 3, 20)
        for i in range(n)
    ]


class TestCoordinates:
    def test_chart_width_is_constant(self) -> None:
        assert ViewProjector([]).chart_width() == 800
        assert ViewProjector(THREE).chart_width() == 800

    @pytest.mark.parametrize("n", [0, 1])
    def test_x_is_zero_for_tiny_windows(self, n: int) -> None:
        projector = ViewProjector(THREE[:n])
        assert projector.x_coordinate(0) == 0

    def test_x_spans_full_width(self) -> None:
        projector = ViewProjector(THREE)
        assert projector.x_coordinate(0) == 0
        assert projector.x_coordinate(1) == 400
        assert projector.x_coordinate(2) == 800

    def test_y_normalizes_and_inverts(self) -> None:
        values = [10.0, 20.0, 30.0]
        assert ViewProjector.y_coordinate(10.0, values) == 240
        assert ViewProjector.y_coordinate(20.0, values) == 130
        assert ViewProjector.y_coordinate(30.0, values) == 20

    def test_y_flat_window_sits_on_axis(self) -> None:
        assert ViewProjector.y_coordinate(5.0, [5.0, 5.0]) == 240


class TestPolyline:
    def test_points_in_insertion_order(self) -> None:
        projector = ViewProjector(THREE)
        assert projector.polyline_points(Metric.POWER) == "0.0,240.0 400.0,130.0 800.0,20.0"
        assert projector.polyline_points(Metric.TEMPERATURE) == "0.0,240.0 400.0,130.0 800.0,20.0"

    def test_empty_window(self) -> None:
        assert ViewProjector([]).polyline_points(Metric.POWER) == ""

    def test_markers_carry_values_and_keys(self) -> None:
        markers = ViewProjector(THREE).markers(Metric.TEMPERATURE)
        assert [m.value for m in markers] == [20, 25, 30]
        assert [m.key for m in markers] == ["point_1000", "point_2000", "point_3000"]
        assert markers[1].display_time == "00:00:02"


class TestAxisLabels:
    def test_small_window_labels_every_sample(self) -> None:
        labels = ViewProjector(THREE).axis_labels()
        assert [label.display_time for label in labels] == ["00:00", "00:00", "00:00"]
        assert [label.key for label in labels] == ["label_1000", "label_2000", "label_3000"]
        assert [label.x for label in labels] == [0, 400, 800]

    def test_full_window_subsampled(self) -> None:
        window = _window(120)
        labels = ViewProjector(window).axis_labels()
        # step = 120 // 5 = 24
        assert len(labels) == 5
        assert [label.key for label in labels] == [
            f"label_{window[i].timestamp_ms}" for i in (0, 24, 48, 72, 96)
        ]
        assert labels[1].display_time == "10:02"
        assert labels[1].x == pytest.approx(24 / 119 * 800)

    def test_empty_window(self) -> None:
        assert ViewProjector([]).axis_labels() == []


class TestRecentRows:
    def test_descending_order(self) -> None:
        rows = ViewProjector(THREE).recent_rows()
        assert [r.timestamp_ms for r in rows] == [3000, 2000, 1000]
        assert [r.key for r in rows] == ["data_3000", "data_2000", "data_1000"]

    def test_limited_to_last_minute(self) -> None:
        window = _window(30)
        rows = ViewProjector(window).recent_rows()
        assert len(rows) == 12
        assert rows[0].timestamp_ms == window[-1].timestamp_ms
        assert rows[-1].timestamp_ms == window[-12].timestamp_ms

    def test_row_dict_rounds_for_display(self) -> None:
        row = ViewProjector([_sample(5, "00:00:05", 69.4444, 19.950000000000045)]).recent_rows()[0]
        assert row.to_dict() == {
            "key": "data_5",
            "timestamp_ms": 5,
            "display_time": "00:00:05",
            "power_kwh": 69.44,
            "temp_celsius": 19.95,
        }
