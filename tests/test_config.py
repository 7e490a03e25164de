"""Tests for ledgerdesk.config."""

import stat
from pathlib import Path

import pytest

from ledgerdesk.config import (
    DEFAULT_CONFIG,
    create_default_config,
    get_config_path,
    load_config,
    load_settings,
    set_value,
)


class TestConfigPath:
    """Tests for get_config_path."""

    def test_respects_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_path() == tmp_path / "ledgerdesk" / "config.toml"


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "missing.toml") == DEFAULT_CONFIG

    def test_load_config_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_partial_file_merges_over_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.toml"
        config_path.write_text('[export]\nheaders = "en"\n', encoding="utf-8")

        settings = load_settings(config_path)

        assert settings["export"]["headers"] == "en"
        assert settings["undo"]["depth"] == DEFAULT_CONFIG["undo"]["depth"]
        assert settings["default_sheet_name"] == "운영비"

    def test_defaults_not_mutated(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.toml")
        settings["undo"]["depth"] = 1

        assert DEFAULT_CONFIG["undo"]["depth"] == 20


class TestWriteConfig:
    """Tests for create_default_config and set_value."""

    def test_create_default_is_private(self, tmp_path: Path) -> None:
        config_path = tmp_path / "nested" / "config.toml"

        create_default_config(config_path)

        assert load_config(config_path) == DEFAULT_CONFIG
        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    def test_set_nested_value(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.toml"

        set_value("undo.depth", 50, config_path)
        set_value("default_start_time", "08:00", config_path)

        assert load_config(config_path) == {"undo": {"depth": 50}, "default_start_time": "08:00"}
        assert load_settings(config_path)["undo"]["depth"] == 50
