"""Chart and table projections of a window snapshot."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from power_monitor.telemetry.sample import DerivedSample

DEFAULT_CHART_WIDTH = 800
CHART_BOTTOM = 240  # y of the x-axis
CHART_SPAN = 220  # usable plot height above the axis
AXIS_LABEL_COUNT = 5
RECENT_ROW_COUNT = 12  # one minute of 5-second samples


class Metric(str, Enum):
    POWER = "power"
    TEMPERATURE = "temperature"

    def value_of(self, sample: DerivedSample) -> float:
        if self is Metric.POWER:
            return sample.power_kwh
        return sample.temp_celsius


@dataclass(frozen=True)
class ChartPoint:
    x: float
    y: float
    value: float
    display_time: str
    key: str


@dataclass(frozen=True)
class AxisLabel:
    x: float
    display_time: str  # HH:MM
    key: str


@dataclass(frozen=True)
class TableRow:
    timestamp_ms: int
    display_time: str
    power_kwh: float
    temp_celsius: float
    key: str

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "timestamp_ms": self.timestamp_ms,
            "display_time": self.display_time,
            "power_kwh": round(self.power_kwh, 2),
            "temp_celsius": round(self.temp_celsius, 2),
        }


class ViewProjector:
    """Read-only projections over an oldest-first snapshot of the window."""

    def __init__(
        self,
        samples: Sequence[DerivedSample],
        chart_width: int = DEFAULT_CHART_WIDTH,
    ) -> None:
        self._samples = tuple(samples)
        self._chart_width = chart_width

    def __len__(self) -> int:
        return len(self._samples)

    def chart_width(self) -> int:
        return self._chart_width

    def x_coordinate(self, index: int) -> float:
        n = len(self._samples)
        if n <= 1:
            return 0
        return (index / (n - 1)) * self._chart_width

    @staticmethod
    def y_coordinate(value: float, values: Sequence[float]) -> float:
        """Min-max normalize into [20, 240], larger values higher up."""
        low = min(values)
        high = max(values)
        span = (high - low) or 1
        return CHART_BOTTOM - ((value - low) / span) * CHART_SPAN

    def values(self, metric: Metric) -> list[float]:
        return [metric.value_of(s) for s in self._samples]

    def markers(self, metric: Metric) -> list[ChartPoint]:
        values = self.values(metric)
        return [
            ChartPoint(
                x=self.x_coordinate(i),
                y=self.y_coordinate(value, values),
                value=value,
                display_time=sample.display_time,
                key=f"point_{sample.timestamp_ms}",
            )
            for i, (sample, value) in enumerate(zip(self._samples, values))
        ]

    def polyline_points(self, metric: Metric) -> str:
        return " ".join(f"{p.x},{p.y}" for p in self.markers(metric))

    def axis_labels(self) -> list[AxisLabel]:
        n = len(self._samples)
        if n == 0:
            return []
        step = max(1, n // AXIS_LABEL_COUNT)
        return [
            AxisLabel(
                x=self.x_coordinate(i),
                display_time=":".join(self._samples[i].display_time.split(":")[:2]),
                key=f"label_{self._samples[i].timestamp_ms}",
            )
            for i in range(0, n, step)
        ]

    def recent_rows(self) -> list[TableRow]:
        """Last minute of samples, newest first."""
        return [
            TableRow(
                timestamp_ms=s.timestamp_ms,
                display_time=s.display_time,
                power_kwh=s.power_kwh,
                temp_celsius=s.temp_celsius,
                key=f"data_{s.timestamp_ms}",
            )
            for s in reversed(self._samples[-RECENT_ROW_COUNT:])
        ]
