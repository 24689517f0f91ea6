"""Tests for boxpusher.core.config – YAML settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from boxpusher.core.config import CONFIG_ENV_VAR, Settings, default_config_path, load_settings
from boxpusher.core.constants import BOARD_DIMENSIONS, DIFFICULTY_SOURCE, SEQUENCE_SOURCE, Dimensions


def _write_yaml(path: Path, data: object) -> Path:
    path.write_text(yaml.dump(data, default_flow_style=False), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Config file location
# ---------------------------------------------------------------------------

class TestConfigPath:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.yaml"))
        assert default_config_path() == tmp_path / "custom.yaml"

    def test_default_under_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert default_config_path() == tmp_path / ".boxpusher" / "config.yaml"


# ---------------------------------------------------------------------------
# load_settings – happy paths
# ---------------------------------------------------------------------------

class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.dimensions == BOARD_DIMENSIONS
        assert settings.difficulty_source == DIFFICULTY_SOURCE
        assert settings.sequence_source == SEQUENCE_SOURCE

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path).dimensions == BOARD_DIMENSIONS

    def test_full_config(self, tmp_path: Path):
        path = _write_yaml(tmp_path / "config.yaml", {
            "board": {"width": 10, "height": 8},
            "storage": {"path": str(tmp_path / "kv.json")},
            "levels": {"difficulty": "d.json", "sequence": "s.json"},
        })
        settings = load_settings(path)
        assert settings.dimensions == Dimensions(10, 8)
        assert settings.storage_path == tmp_path / "kv.json"
        assert settings.difficulty_source == tmp_path / "d.json"
        assert settings.sequence_source == tmp_path / "s.json"

    def test_partial_board(self, tmp_path: Path):
        path = _write_yaml(tmp_path / "config.yaml", {"board": {"width": 12}})
        assert load_settings(path).dimensions == Dimensions(12, BOARD_DIMENSIONS.height)

    def test_reads_env_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = _write_yaml(tmp_path / "env.yaml", {"board": {"height": 5}})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_settings().dimensions.height == 5

    def test_settings_frozen(self):
        with pytest.raises(AttributeError):
            Settings().dimensions = Dimensions(1, 1)  # type: ignore[misc]


# ---------------------------------------------------------------------------
# load_settings – error paths
# ---------------------------------------------------------------------------

class TestLoadSettingsErrors:
    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("- item\n", encoding="utf-8")
        with pytest.raises(ValueError, match="expected a YAML mapping"):
            load_settings(path)

    def test_section_not_a_mapping(self, tmp_path: Path):
        path = _write_yaml(tmp_path / "config.yaml", {"board": "big"})
        with pytest.raises(ValueError, match="'board' must be a mapping"):
            load_settings(path)

    @pytest.mark.parametrize("width", [0, -3, "wide", True, 2.5])
    def test_invalid_width(self, tmp_path: Path, width):
        path = _write_yaml(tmp_path / "config.yaml", {"board": {"width": width}})
        with pytest.raises(ValueError, match="board.width"):
            load_settings(path)

    def test_invalid_storage_path(self, tmp_path: Path):
        path = _write_yaml(tmp_path / "config.yaml", {"storage": {"path": 42}})
        with pytest.raises(ValueError, match="'path'"):
            load_settings(path)
