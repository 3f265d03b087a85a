"""Pydantic configuration models for all system settings."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

PAGE_SIZES: tuple[int, ...] = (5, 10, 20, 50)


class FeedConfig(BaseModel):
    url: str = ""  # HTTP(S) location of the YAML feed; takes precedence over path
    path: str = ""  # Local feed file, used when url is empty
    timeout_seconds: float = Field(30.0, gt=0.0)


class SamplingConfig(BaseModel):
    clock_interval_seconds: float = Field(1.0, gt=0.0)
    settle_delay_seconds: float = Field(0.5, ge=0.0)
    window_capacity: int = Field(120, ge=1)  # 10 minutes at the 5 s cadence


class SyntheticConfig(BaseModel):
    sample_count: int = Field(17280, ge=1)  # 24h * 60min * 12 samples per minute
    seed: int | None = None


class DashboardConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    sse_interval_seconds: int = 5
    chart_width: int = 800
    default_page_size: int = 5
    timezone: str = ""  # IANA name; empty = host local time

    @field_validator("default_page_size")
    @classmethod
    def _check_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZES:
            raise ValueError(f"default_page_size must be one of {PAGE_SIZES}")
        return value


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"  # "json" or "console"
    file: str = ""
    buffer_capacity: int = Field(1000, ge=1)  # entries kept for /api/logs
    levels: dict[str, str] = {}  # per-logger overrides, e.g. {"power_monitor.sampling": "DEBUG"}


class AppConfig(BaseModel):
    """Root configuration model containing all system settings."""

    feed: FeedConfig = FeedConfig()
    sampling: SamplingConfig = SamplingConfig()
    synthetic: SyntheticConfig = SyntheticConfig()
    dashboard: DashboardConfig = DashboardConfig()
    logging: LoggingConfig = LoggingConfig()
