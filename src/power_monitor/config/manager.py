"""Layered YAML configuration: shipped defaults, user overrides, environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from power_monitor.config.schema import AppConfig

logger = logging.getLogger(__name__)

# Environment variables that override a single config key, applied last.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "POWER_MONITOR_FEED_URL": ("feed", "url"),
    "POWER_MONITOR_FEED_PATH": ("feed", "path"),
    "POWER_MONITOR_TIMEZONE": ("dashboard", "timezone"),
    "POWER_MONITOR_LOG_LEVEL": ("logging", "level"),
}


class ConfigManager:
    """Builds the validated AppConfig from up to three layers.

    1. ``config.defaults.yaml`` shipped with the package
    2. ``config.yaml`` written by the operator or by the dashboard
    3. ``POWER_MONITOR_*`` environment variables (see ENV_OVERRIDES)
    """

    def __init__(
        self,
        defaults_path: Path | None = None,
        user_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._defaults_path = defaults_path or Path("config.defaults.yaml")
        self._user_path = user_path or Path("config.yaml")
        self._environ = os.environ if environ is None else environ
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded. Call load() first.")
        return self._config

    def load(self) -> AppConfig:
        """Merge all layers and validate; pydantic errors propagate."""
        merged = self._deep_merge(
            self._read_yaml(self._defaults_path),
            self._read_yaml(self._user_path),
        )
        env = self._env_layer()
        if env:
            logger.info("Environment overrides: %s", ", ".join(sorted(_dotted_keys(env))))
            merged = self._deep_merge(merged, env)
        self._config = AppConfig.model_validate(merged)
        logger.info(
            "Configuration loaded (feed: %s)",
            self._config.feed.url or self._config.feed.path or "synthetic only",
        )
        return self._config

    def to_json(self) -> str:
        return self.config.model_dump_json(indent=2)

    def save_user_config(self, updates: dict[str, Any]) -> AppConfig:
        """Merge ``updates`` into the user file and reload.

        The candidate is validated before anything is written, so a bad
        update leaves both the file and the live config untouched.
        """
        current = self._read_yaml(self._user_path)
        merged = self._deep_merge(current, updates)
        AppConfig.model_validate(
            self._deep_merge(self._read_yaml(self._defaults_path), merged)
        )
        with open(self._user_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(merged, f, default_flow_style=False, sort_keys=False)
        logger.info("User config saved to %s", self._user_path)
        return self.load()

    def _env_layer(self) -> dict[str, Any]:
        layer: dict[str, Any] = {}
        for var, (section, key) in ENV_OVERRIDES.items():
            value = self._environ.get(var)
            if value:
                layer.setdefault(section, {})[key] = value
        return layer

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is %s, not a mapping", path, type(data).__name__)
            return {}
        return data

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, returning a new dict."""
        result = dict(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def _dotted_keys(layer: dict[str, Any]) -> list[str]:
    return [f"{section}.{key}" for section, values in layer.items() for key in values]
