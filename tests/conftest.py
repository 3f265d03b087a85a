"""Shared test fixtures for Power Monitor."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from power_monitor.config.manager import ConfigManager
from power_monitor.config.schema import AppConfig

MOCK_FEED = """
power:
  unit: 'MW'
  values:
    - time: '00:00:00'
      value: 50.0
    - time: '00:00:05'
      value: 51.2
temperature:
  unit: 'dK'
  values:
    - time: '00:00:00'
      value: 2931
    - time: '00:00:05'
      value: 2932
"""


class SteppingClock:
    """Deterministic wall clock advancing a fixed step on every read."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=5)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture
def config() -> AppConfig:
    """Default config with a small synthetic day so fallbacks stay fast."""
    return AppConfig(synthetic={"sample_count": 240, "seed": 7})


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """Provide a config manager with test paths."""
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text("dashboard:\n  port: 9090\n")
    user = tmp_path / "config.yaml"
    mgr = ConfigManager(defaults_path=defaults, user_path=user, environ={})
    mgr.load()
    return mgr


@pytest.fixture
def feed_text() -> str:
    return MOCK_FEED


@pytest.fixture
def fetcher(feed_text: str) -> AsyncMock:
    """Fetcher returning the two-sample mock feed."""
    mock = AsyncMock()
    mock.fetch_raw_series = AsyncMock(return_value=feed_text)
    return mock


@pytest.fixture
def fixed_clock():
    """Clock pinned to 00:00:03 local time (feed index 0)."""
    return lambda: datetime(2023, 1, 1, 0, 0, 3)


@pytest.fixture
def stepping_clock() -> SteppingClock:
    return SteppingClock(datetime(2023, 1, 1, 0, 0, 3))
