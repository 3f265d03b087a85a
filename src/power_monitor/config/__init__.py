"""Configuration management for Power Monitor."""

from power_monitor.config.schema import AppConfig
from power_monitor.config.manager import ConfigManager

__all__ = ["AppConfig", "ConfigManager"]
