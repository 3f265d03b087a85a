"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from power_monitor.config.manager import ConfigManager
from power_monitor.config.schema import AppConfig

REPO_DEFAULTS = Path(__file__).resolve().parents[1] / "config.defaults.yaml"


class TestAppConfig:
    def test_default_config_is_valid(self) -> None:
        config = AppConfig()
        assert config.sampling.window_capacity == 120
        assert config.sampling.clock_interval_seconds == 1.0
        assert config.synthetic.sample_count == 17280
        assert config.dashboard.chart_width == 800
        assert config.dashboard.default_page_size == 5

    def test_custom_values(self) -> None:
        config = AppConfig(
            feed={"url": "http://feed.local/data.yml", "timeout_seconds": 5},
            sampling={"window_capacity": 60},
        )
        assert config.feed.url == "http://feed.local/data.yml"
        assert config.feed.timeout_seconds == 5.0
        assert config.sampling.window_capacity == 60

    def test_rejects_unknown_page_size(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(dashboard={"default_page_size": 7})

    def test_rejects_empty_window(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(sampling={"window_capacity": 0})

    def test_shipped_defaults_match_model(self) -> None:
        mgr = ConfigManager(
            defaults_path=REPO_DEFAULTS,
            user_path=REPO_DEFAULTS.parent / "absent.yaml",
            environ={},
        )
        assert mgr.load() == AppConfig()


class TestConfigManager:
    def test_load_defaults_only(self, config_manager: ConfigManager) -> None:
        assert config_manager.config.dashboard.port == 9090

    def test_user_overrides(self, tmp_path: Path) -> None:
        defaults_file = tmp_path / "defaults.yaml"
        defaults_file.write_text("feed:\n  path: a.yml\n  timeout_seconds: 10\n")
        user_file = tmp_path / "user.yaml"
        user_file.write_text("feed:\n  path: b.yml\n")
        mgr = ConfigManager(defaults_path=defaults_file, user_path=user_file, environ={})
        config = mgr.load()
        assert config.feed.path == "b.yml"
        assert config.feed.timeout_seconds == 10.0

    def test_config_before_load_raises(self, tmp_path: Path) -> None:
        mgr = ConfigManager(defaults_path=tmp_path / "d.yaml", user_path=tmp_path / "u.yaml")
        with pytest.raises(RuntimeError):
            _ = mgr.config

    def test_deep_merge(self) -> None:
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"b": 10}, "e": 5}
        result = ConfigManager._deep_merge(base, override)
        assert result == {"a": {"b": 10, "c": 2}, "d": 3, "e": 5}

    def test_save_user_config(self, config_manager: ConfigManager, tmp_path: Path) -> None:
        config = config_manager.save_user_config({"sampling": {"settle_delay_seconds": 0.1}})
        assert config.sampling.settle_delay_seconds == 0.1
        saved = yaml.safe_load((tmp_path / "config.yaml").read_text())
        assert saved == {"sampling": {"settle_delay_seconds": 0.1}}

    def test_to_json(self, config_manager: ConfigManager) -> None:
        assert '"window_capacity"' in config_manager.to_json()

    def test_environment_overrides_files(self, tmp_path: Path) -> None:
        user_file = tmp_path / "user.yaml"
        user_file.write_text("feed:\n  path: b.yml\n")
        mgr = ConfigManager(
            defaults_path=tmp_path / "absent.yaml",
            user_path=user_file,
            environ={"POWER_MONITOR_FEED_PATH": "/srv/feed/data.yml", "POWER_MONITOR_LOG_LEVEL": ""},
        )
        config = mgr.load()
        assert config.feed.path == "/srv/feed/data.yml"
        assert config.logging.level == "INFO"

    def test_non_mapping_file_ignored(self, tmp_path: Path) -> None:
        user_file = tmp_path / "user.yaml"
        user_file.write_text("- just\n- a list\n")
        mgr = ConfigManager(defaults_path=tmp_path / "absent.yaml", user_path=user_file, environ={})
        assert mgr.load() == AppConfig()

    def test_invalid_update_not_written(self, config_manager: ConfigManager, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            config_manager.save_user_config({"dashboard": {"default_page_size": 7}})
        assert not (tmp_path / "config.yaml").exists()
        assert config_manager.config.dashboard.default_page_size == 5
