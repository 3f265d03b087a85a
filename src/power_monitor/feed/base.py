"""Feed data model, source variants and error hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

DEFAULT_TIME = "00:00:00"


# ── Errors ───────────────────────────────────────────────────


class FeedError(Exception):
    """The feed cannot be used for this session."""


class FeedTransportError(FeedError):
    """Fetching the raw feed failed (network, HTTP status, file I/O)."""


class FeedParseError(FeedError):
    """The raw feed text is not a well-formed series document."""


class NoUsableDataError(FeedError):
    """Normalization left no valid, index-aligned samples."""


# ── Raw feed ─────────────────────────────────────────────────


@dataclass(frozen=True)
class RawSample:
    time: str
    value: Any  # number, numeric string, or garbage to be dropped


@dataclass(frozen=True)
class RawSeries:
    unit: str
    values: tuple[RawSample, ...] = ()


@dataclass(frozen=True)
class RawSeriesDoc:
    power: RawSeries
    temperature: RawSeries


# ── Validated feed ───────────────────────────────────────────


@dataclass(frozen=True)
class ValidatedSample:
    time: str
    value: float


@dataclass(frozen=True)
class ValidatedSeries:
    unit: str
    values: tuple[ValidatedSample, ...] = ()

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class SeriesPair:
    """Power (MW) and temperature (dK) series of identical length."""

    power: ValidatedSeries
    temperature: ValidatedSeries

    def __post_init__(self) -> None:
        if len(self.power) != len(self.temperature):
            raise ValueError(
                f"series length mismatch: power={len(self.power)} "
                f"temperature={len(self.temperature)}"
            )

    def __len__(self) -> int:
        return len(self.power)


class SourceKind(str, Enum):
    """Where the active series came from."""

    REAL = "real"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class ActiveSource:
    """The single data source a session samples from."""

    kind: SourceKind
    series: SeriesPair
    loaded_at_ms: int = field(default=0, compare=False)

    @property
    def is_real(self) -> bool:
        return self.kind == SourceKind.REAL


class FeedFetcher(Protocol):
    """Supplies the raw feed text."""

    async def fetch_raw_series(self) -> str: ...

    async def close(self) -> None: ...
