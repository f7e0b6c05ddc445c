"""Tests for configuration loading and logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from archishield.settings import AuditSettings, ConfigManager, configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in [
        "ARCHISHIELD_ENV",
        "ARCHISHIELD_LOG_LEVEL",
        "ARCHISHIELD_REGULATIONS",
        "ARCHISHIELD_NEIGHBORHOOD_RADIUS",
        "ARCHISHIELD_PARALLEL",
        "ARCHISHIELD_MAX_WORKERS",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def manager() -> ConfigManager:
    return ConfigManager()


# ---------------------------------------------------------------------------
# ConfigManager
# ---------------------------------------------------------------------------


class TestEnvTemplate:

    def test_lists_every_key(self, manager, tmp_path) -> None:
        path = manager.generate_env_template(tmp_path)
        assert path.name == ".env.example"
        content = path.read_text(encoding="utf-8")
        assert content.startswith("# ArchiShield Configuration Template")
        assert "ARCHISHIELD_NEIGHBORHOOD_RADIUS=150" in content
        assert "ARCHISHIELD_PARALLEL=true" in content


class TestLoadConfig:

    def test_development_defaults(self, manager, tmp_path) -> None:
        config = manager.load_config(tmp_path)
        assert config["ARCHISHIELD_ENV"] == "development"
        assert config["ARCHISHIELD_LOG_LEVEL"] == "DEBUG"
        assert config["ARCHISHIELD_PARALLEL"] == "true"

    def test_testing_profile(self, manager, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("ARCHISHIELD_ENV", "testing")
        config = manager.load_config(tmp_path)
        assert config["ARCHISHIELD_PARALLEL"] == "false"

    def test_production_profile(self, manager, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("ARCHISHIELD_ENV", "production")
        assert manager.load_config(tmp_path)["ARCHISHIELD_LOG_LEVEL"] == "WARNING"

    def test_layering(self, manager, tmp_path, monkeypatch) -> None:
        settings_dir = tmp_path / ".archishield"
        settings_dir.mkdir()
        (settings_dir / "config.json").write_text(
            json.dumps({"ARCHISHIELD_NEIGHBORHOOD_RADIUS": 120, "ARCHISHIELD_MAX_WORKERS": 2}),
            encoding="utf-8",
        )
        (tmp_path / ".env").write_text(
            "# local\nARCHISHIELD_NEIGHBORHOOD_RADIUS=100\n", encoding="utf-8"
        )
        monkeypatch.setenv("ARCHISHIELD_MAX_WORKERS", "4")

        config = manager.load_config(tmp_path)
        assert config["ARCHISHIELD_NEIGHBORHOOD_RADIUS"] == "100"
        assert config["ARCHISHIELD_MAX_WORKERS"] == "4"

    def test_unreadable_config_json_ignored(self, manager, tmp_path) -> None:
        settings_dir = tmp_path / ".archishield"
        settings_dir.mkdir()
        (settings_dir / "config.json").write_text("{broken", encoding="utf-8")
        assert manager.load_config(tmp_path)["ARCHISHIELD_MAX_WORKERS"] == "6"

    def test_non_object_config_json_warns(self, manager, tmp_path, caplog) -> None:
        settings_dir = tmp_path / ".archishield"
        settings_dir.mkdir()
        (settings_dir / "config.json").write_text("[1, 2]", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="archishield.settings"):
            config = manager.load_config(tmp_path)
        assert config["ARCHISHIELD_MAX_WORKERS"] == "6"
        assert "JSON object" in caplog.text


class TestLoadSettings:

    def test_typed_values(self, manager, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("ARCHISHIELD_ENV", "testing")
        monkeypatch.setenv("ARCHISHIELD_NEIGHBORHOOD_RADIUS", "75.5")
        settings = manager.load_settings(tmp_path)
        assert settings.env == "testing"
        assert settings.neighborhood_radius == 75.5
        assert settings.parallel is False
        assert settings.max_workers == 6
        assert settings.regulations_path is None

    @pytest.mark.parametrize("value", ["0", "-5", "wide"])
    def test_invalid_radius(self, manager, tmp_path, monkeypatch, value: str) -> None:
        monkeypatch.setenv("ARCHISHIELD_NEIGHBORHOOD_RADIUS", value)
        with pytest.raises(ValueError):
            manager.load_settings(tmp_path)

    @pytest.mark.parametrize("raw,expected", [("YES", True), ("on", True), ("0", False), ("no", False)])
    def test_parallel_flag(self, raw: str, expected: bool) -> None:
        assert AuditSettings.from_config({"ARCHISHIELD_PARALLEL": raw}).parallel is expected

    def test_log_level_uppercased(self) -> None:
        assert AuditSettings(log_level=" warning ").log_level == "WARNING"


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        pkg_logger = logging.getLogger("archishield")
        level, handlers = pkg_logger.level, list(pkg_logger.handlers)
        yield
        pkg_logger.setLevel(level)
        pkg_logger.handlers[:] = handlers

    def test_sets_level_and_single_handler(self) -> None:
        pkg_logger = logging.getLogger("archishield")
        pkg_logger.handlers.clear()
        configure_logging("warning")
        configure_logging("WARNING")
        assert pkg_logger.level == logging.WARNING
        assert len(pkg_logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging("chatty")
        assert logging.getLogger("archishield").level == logging.INFO
