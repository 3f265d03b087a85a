"""Async sampling scheduler: feed loading, fallback, and the periodic ticks."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from power_monitor.config.schema import AppConfig
from power_monitor.feed.base import (
    ActiveSource,
    FeedError,
    FeedFetcher,
    FeedTransportError,
    RawSeriesDoc,
    SeriesPair,
    SourceKind,
)
from power_monitor.feed.normalizer import normalize_series
from power_monitor.feed.parser import parse_series
from power_monitor.feed.synthetic import generate_synthetic_series
from power_monitor.logging.context import bind_context
from power_monitor.telemetry.conversion import TICK_SECONDS, power_kwh_per_tick, temp_celsius
from power_monitor.telemetry.resolver import resolve_index
from power_monitor.telemetry.sample import DerivedSample
from power_monitor.telemetry.window import WindowBuffer
from power_monitor.time_utils import format_clock, format_hms, local_now

logger = logging.getLogger(__name__)

PLACEHOLDER = "--"

Parser = Callable[[str], RawSeriesDoc]
SourceListener = Callable[[ActiveSource], None]
Clock = Callable[[], datetime]


class SessionState(str, Enum):
    """Lifecycle of a sampling session."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    ACTIVE_REAL = "active_real"
    ACTIVE_SYNTHETIC = "active_synthetic"


@dataclass
class DisplaySignals:
    """Scalar strings shown in the dashboard header and value cards."""

    current_power: str = PLACEHOLDER  # kWh over the last tick, 2 decimals
    current_temperature: str = PLACEHOLDER  # °C, 2 decimals
    last_update: str = PLACEHOLDER  # HH:MM:SS of the last sampling tick
    current_time: str = ""  # long clock string, refreshed every clock tick


@dataclass
class SchedulerState:
    """Snapshot of the scheduler state."""

    session: SessionState = SessionState.UNINITIALIZED
    tick_count: int = 0
    failed_ticks: int = 0
    last_tick_at: datetime | None = None
    last_error: str = ""
    is_running: bool = False
    signals: DisplaySignals = field(default_factory=DisplaySignals)


def derive_sample(series: SeriesPair, now: datetime) -> DerivedSample:
    """Convert the feed sample matching ``now`` into display units."""
    index = resolve_index(now, len(series))
    power = series.power.values[index]
    temperature = series.temperature.values[index]
    return DerivedSample(
        timestamp_ms=int(now.timestamp() * 1000),
        display_time=format_hms(now),
        power_kwh=power_kwh_per_tick(power.value),
        temp_celsius=temp_celsius(temperature.value),
        feed_time=power.time,
    )


class SamplingScheduler:
    """Owns the active data source and the sliding window.

    After the initial load two loops run until stopped:
    1. Clock loop (every clock_interval_seconds, default 1s) refreshing the
       displayed wall-clock string only.
    2. Sampling loop (every TICK_SECONDS) resolving the current feed index,
       converting it and pushing the result into the window.

    Fallback to synthetic data is one-way: only a new load() can bring the
    real feed back.
    """

    def __init__(
        self,
        config: AppConfig,
        fetcher: FeedFetcher | None = None,
        *,
        parser: Parser = parse_series,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._parser = parser
        tz_name = config.dashboard.timezone
        self._clock: Clock = clock or (lambda: local_now(tz_name))
        self._rng = rng or random.Random(config.synthetic.seed)
        self._source: ActiveSource | None = None
        self._buffer = WindowBuffer(config.sampling.window_capacity)
        self._state = SchedulerState()
        self._state.signals.current_time = format_clock(self._clock())
        self._stop_event = asyncio.Event()
        self._tasks: list[asyncio.Task] = []
        self._source_listeners: list[SourceListener] = []

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def signals(self) -> DisplaySignals:
        return self._state.signals

    @property
    def source(self) -> ActiveSource | None:
        return self._source

    def snapshot(self) -> tuple[DerivedSample, ...]:
        """Read-only, oldest-first copy of the current window."""
        return self._buffer.all()

    def on_source_change(self, listener: SourceListener) -> None:
        """Call ``listener`` every time a new source (and empty window) is installed."""
        self._source_listeners.append(listener)

    # ── Loading ──────────────────────────────────────────────

    async def load(self) -> SessionState:
        """Fetch, parse and normalize the feed, falling back on any failure."""
        if self._state.session == SessionState.LOADING:
            logger.warning("Feed load already in progress, request ignored")
            return self._state.session

        self._state.session = SessionState.LOADING
        try:
            series = await self._load_real_series()
        except FeedError as exc:
            logger.error("Error loading feed: %s", exc)
            self._fall_back(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error loading feed")
            self._fall_back(str(exc))
        else:
            self._activate_real(series)
        return self._state.session

    async def reload(self) -> SessionState:
        """Run a fresh load cycle; the window restarts with the new source."""
        logger.info("Feed reload requested (current: %s)", self._state.session.value)
        return await self.load()

    async def _load_real_series(self) -> SeriesPair:
        if self._fetcher is None:
            raise FeedTransportError("no feed source configured")
        text = await self._fetcher.fetch_raw_series()
        doc = self._parser(text)
        return normalize_series(doc)

    def _activate_real(self, series: SeriesPair) -> None:
        self._install(SourceKind.REAL, series)
        self._state.session = SessionState.ACTIVE_REAL
        self._state.last_error = ""
        logger.info("Feed loaded: %d samples per series", len(series))
        if self._state.is_running:
            self._spawn(self._settle_tick())

    def _fall_back(self, reason: str) -> None:
        logger.warning("Falling back to synthetic data")
        self._state.last_error = reason
        series = generate_synthetic_series(self._rng, self._config.synthetic.sample_count)
        self._install(SourceKind.SYNTHETIC, series)
        self._state.session = SessionState.ACTIVE_SYNTHETIC
        if not self._stop_event.is_set():
            self.tick_once()

    def _install(self, kind: SourceKind, series: SeriesPair) -> None:
        # A new source never inherits the previous window
        self._source = ActiveSource(
            kind=kind,
            series=series,
            loaded_at_ms=int(self._clock().timestamp() * 1000),
        )
        self._buffer = WindowBuffer(self._config.sampling.window_capacity)
        self._tag_logs()
        for listener in self._source_listeners:
            listener(self._source)

    def _tag_logs(self) -> None:
        # Context vars are per task; every handler re-binds the current kind
        bind_context(feed_source=self._source.kind.value if self._source else "none")

    # ── Tick handlers ────────────────────────────────────────

    def tick_once(self) -> DerivedSample | None:
        """Run one sampling tick and return the sample pushed, if any."""
        source = self._source
        if source is None:
            logger.warning("No telemetry source loaded yet")
            return None

        self._tag_logs()
        self._state.tick_count += 1
        try:
            now = self._clock()
            sample = derive_sample(source.series, now)
        except Exception as exc:
            self._state.failed_ticks += 1
            logger.exception(
                "Tick %d: sampling failed on %s source",
                self._state.tick_count,
                source.kind.value,
            )
            if source.is_real:
                self._fall_back(f"tick {self._state.tick_count} failed: {exc}")
                return self._buffer.latest()
            return None

        self._buffer.push(sample)
        self._state.last_tick_at = now
        signals = self._state.signals
        signals.current_power = f"{sample.power_kwh:.2f}"
        signals.current_temperature = f"{sample.temp_celsius:.2f}"
        signals.last_update = sample.display_time
        logger.debug(
            "Tick %d: feed_time=%s power=%.3fkWh temp=%.2fC window=%d",
            self._state.tick_count,
            sample.feed_time,
            sample.power_kwh,
            sample.temp_celsius,
            len(self._buffer),
        )
        return sample

    def clock_tick(self) -> str:
        self._tag_logs()
        self._state.signals.current_time = format_clock(self._clock())
        return self._state.signals.current_time

    # ── Loops ────────────────────────────────────────────────

    async def run(self) -> None:
        """Load the feed, then run both loops until stop() is called."""
        self._state.is_running = True
        self._stop_event.clear()
        logger.info(
            "Sampling scheduler starting (sample: %ds, clock: %.1fs)",
            TICK_SECONDS,
            self._config.sampling.clock_interval_seconds,
        )

        try:
            await self.load()
            self._spawn(self._clock_loop())
            self._spawn(self._sampling_loop())
            await self._stop_event.wait()
        finally:
            await self._cancel_tasks()
            self._state.is_running = False
            logger.info("Sampling scheduler stopped after %d ticks", self._state.tick_count)

    def stop(self) -> None:
        """Signal both loops to stop."""
        self._stop_event.set()

    async def _sampling_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=TICK_SECONDS)
                break  # stop_event was set
            except asyncio.TimeoutError:
                pass
            self.tick_once()

    async def _clock_loop(self) -> None:
        interval = self._config.sampling.clock_interval_seconds
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
                break
            except asyncio.TimeoutError:
                pass
            try:
                self.clock_tick()
            except Exception:
                logger.exception("Clock tick error")

    async def _settle_tick(self) -> None:
        """Extra tick shortly after a real load so the window never looks empty."""
        try:
            await asyncio.wait_for(
                self._stop_event.wait(),
                timeout=self._config.sampling.settle_delay_seconds,
            )
            return
        except asyncio.TimeoutError:
            pass
        self.tick_once()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        self._tasks = [t for t in self._tasks if not t.done()]
        self._tasks.append(asyncio.create_task(coro))

    async def _cancel_tasks(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
