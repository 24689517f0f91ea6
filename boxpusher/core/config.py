from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from boxpusher.core.constants import BOARD_DIMENSIONS, DIFFICULTY_SOURCE, SEQUENCE_SOURCE, Dimensions
from boxpusher.core.storage import default_storage_path

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BOXPUSHER_CONFIG"


@dataclass(frozen=True)
class Settings:
    dimensions: Dimensions = BOARD_DIMENSIONS
    storage_path: Path = field(default_factory=default_storage_path)
    difficulty_source: Path = DIFFICULTY_SOURCE
    sequence_source: Path = SEQUENCE_SOURCE


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".boxpusher" / "config.yaml"


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from a YAML file. A missing file gives the defaults.

    Example::

        board:
          width: 30
          height: 20
        storage:
          path: ~/.boxpusher/storage.json
        levels:
          difficulty: levels_difficulty.json
          sequence: levels_levels_mode.json

    Relative paths are resolved against the config file's directory.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        logger.info("No config at %s, using defaults", config_path)
        return Settings()

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: expected a YAML mapping")

    board = _section(config_path, raw, "board")
    storage = _section(config_path, raw, "storage")
    levels = _section(config_path, raw, "levels")
    base_dir = config_path.parent

    defaults = Settings()
    return Settings(
        dimensions=Dimensions(
            width=_dimension(config_path, board, "width", BOARD_DIMENSIONS.width),
            height=_dimension(config_path, board, "height", BOARD_DIMENSIONS.height),
        ),
        storage_path=_path(config_path, base_dir, storage, "path", defaults.storage_path),
        difficulty_source=_path(config_path, base_dir, levels, "difficulty", DIFFICULTY_SOURCE),
        sequence_source=_path(config_path, base_dir, levels, "sequence", SEQUENCE_SOURCE),
    )


def _section(config_path: Path, raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"{config_path.name}: '{name}' must be a mapping")
    return section


def _dimension(config_path: Path, board: Dict[str, Any], key: str, default: int) -> int:
    value = board.get(key, default)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{config_path.name}: 'board.{key}' must be a positive integer")
    return value


def _path(config_path: Path, base_dir: Path, section: Dict[str, Any], key: str, default: Path) -> Path:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{config_path.name}: '{key}' must be a non-empty path")
    path = Path(value.strip()).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path
