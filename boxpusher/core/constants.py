"""Board dimensions, tile symbols and storage key prefixes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Dimensions:
    """Fixed board size in cells."""

    width: int
    height: int

    @property
    def cells(self) -> int:
        """Number of symbols in a raw level of this size."""
        return self.width * self.height


BOARD_DIMENSIONS = Dimensions(width=30, height=20)

EMPTY = "e"
WALL = "w"
TARGET = "t"
BOX_ON_TARGET = "h"
BOX = "b"
WORKER = "p"

TERRAIN_SYMBOLS = frozenset({EMPTY, WALL, TARGET})
TILE_SYMBOLS = frozenset({EMPTY, WALL, TARGET, BOX_ON_TARGET, BOX, WORKER})

DIFFICULTIES = ("easy", "intermediate", "hard")

SAVED_GAME_PREFIX = "save/"
CUSTOM_SAVE_PREFIX = "custom_save/"
SCOREBOARD_PREFIX = "scoreboard/"
CUSTOM_LEVEL_PREFIX = "level/"

SCOREBOARD_LENGTH = 10

LEVELS_DIR = Path(__file__).resolve().parent.parent / "data" / "levels"
DIFFICULTY_SOURCE = LEVELS_DIR / "levels_difficulty.json"
SEQUENCE_SOURCE = LEVELS_DIR / "levels_levels_mode.json"
