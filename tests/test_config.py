"""Tests for routetree.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from routetree.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_max_depth,
    resolve_schema_source,
    save_global_config,
)
from routetree.exceptions import ConfigError
from routetree.models import DEFAULT_MAX_DEPTH, GlobalConfig, TraversalConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    """XDG paths on Linux and the home-directory fallback elsewhere."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("routetree.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "routetree"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("routetree.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "routetree"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("routetree.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "routetree"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("routetree.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".routetree"
        assert get_data_dir() == tmp_path / ".routetree" / "logs"
        assert get_data_dir().is_dir()


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        _atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("routetree.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config.default_schema is None
        assert config.traversal.max_depth == DEFAULT_MAX_DEPTH

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        original = GlobalConfig(
            default_schema="graph.json",
            traversal=TraversalConfig(max_depth=3),
        )
        save_global_config(original)
        loaded = load_global_config()
        assert loaded.default_schema == "graph.json"
        assert loaded.traversal.max_depth == 3

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        path = isolated_config / "config" / "routetree" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_negative_depth_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "config" / "routetree" / "config.json",
            {"traversal": {"max_depth": -1}},
        )
        with pytest.raises(ConfigError):
            load_global_config()

    def test_load_unknown_output_format_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "config" / "routetree" / "config.json",
            {"output": {"format": "yaml"}},
        )
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_load_returns_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_load_valid_project_config(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "routetree.json", {"max_depth": 2})
        assert load_project_config() == {"max_depth": 2}

    def test_non_object_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "routetree.json", [1, 2])
        with pytest.raises(ConfigError, match="must be a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveMaxDepth:
    """CLI > env > project > global > default."""

    def test_default(self, isolated_config: Path) -> None:
        assert resolve_max_depth() == DEFAULT_MAX_DEPTH

    def test_global_config(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(traversal=TraversalConfig(max_depth=4)))
        assert resolve_max_depth() == 4

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(traversal=TraversalConfig(max_depth=4)))
        _write_json(isolated_config / "routetree.json", {"max_depth": 2})
        assert resolve_max_depth() == 2

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _write_json(isolated_config / "routetree.json", {"max_depth": 2})
        monkeypatch.setenv("ROUTETREE_MAX_DEPTH", "7")
        assert resolve_max_depth() == 7

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("ROUTETREE_MAX_DEPTH", "7")
        assert resolve_max_depth(0) == 0

    def test_env_not_integer(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("ROUTETREE_MAX_DEPTH", "deep")
        with pytest.raises(ConfigError, match="must be an integer"):
            resolve_max_depth()

    def test_env_negative(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("ROUTETREE_MAX_DEPTH", "-3")
        with pytest.raises(ConfigError, match=">= 0"):
            resolve_max_depth()

    def test_project_value_not_integer(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "routetree.json", {"max_depth": True})
        with pytest.raises(ConfigError):
            resolve_max_depth()


class TestResolveSchemaSource:
    """CLI > env > project > global; nothing configured is an error."""

    def test_cli_wins(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTETREE_SCHEMA", "env.json")
        assert resolve_schema_source("cli.json") == "cli.json"

    def test_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTETREE_SCHEMA", "env.json")
        _write_json(isolated_config / "routetree.json", {"default_schema": "project.json"})
        assert resolve_schema_source() == "env.json"

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_schema="global.json"))
        _write_json(isolated_config / "routetree.json", {"default_schema": "project.json"})
        assert resolve_schema_source() == "project.json"

    def test_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_schema="global.json"))
        assert resolve_schema_source() == "global.json"

    def test_nothing_configured(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="No schema given"):
            resolve_schema_source()
