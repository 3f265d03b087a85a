"""Bounded sliding window of derived samples."""

from __future__ import annotations

from collections import deque

from power_monitor.telemetry.sample import DerivedSample

DEFAULT_CAPACITY = 120  # 10 minutes of 5-second samples


class WindowBuffer:
    """Insertion-ordered FIFO of the most recent derived samples.

    Pushing beyond capacity evicts from the front. There is no other way to
    remove entries; readers get immutable snapshots from ``all()``.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._samples: deque[DerivedSample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def push(self, sample: DerivedSample) -> None:
        self._samples.append(sample)

    def all(self) -> tuple[DerivedSample, ...]:
        """Oldest-first snapshot of the window."""
        return tuple(self._samples)

    def latest(self) -> DerivedSample | None:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)
