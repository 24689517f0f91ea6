from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from boxpusher.core.constants import (
    CUSTOM_SAVE_PREFIX,
    SAVED_GAME_PREFIX,
    SCOREBOARD_LENGTH,
    SCOREBOARD_PREFIX,
)
from boxpusher.core.objects import Boxes, Worker
from boxpusher.core.storage import KeyValueStore, Namespace, StoredEntry

logger = logging.getLogger(__name__)


def _core_payload(worker: Worker, boxes: Boxes, moves_made: int, moves_undone: int) -> Dict[str, Any]:
    return {
        "worker": worker.to_dict(),
        "boxes": boxes.to_dict(),
        "movesMade": moves_made,
        "movesUndone": moves_undone,
    }


@dataclass
class GameSave:
    """Progress through the numbered levels."""

    current_level: int
    worker: Worker
    boxes: Boxes
    moves_made: int
    moves_undone: int
    score: int

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"currentLevel": self.current_level}
        payload.update(_core_payload(self.worker, self.boxes, self.moves_made, self.moves_undone))
        payload["score"] = self.score
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: str) -> GameSave:
        payload = json.loads(data)
        return cls(
            current_level=int(payload["currentLevel"]),
            worker=Worker.from_dict(payload["worker"]),
            boxes=Boxes.from_dict(payload["boxes"]),
            moves_made=int(payload.get("movesMade", 0)),
            moves_undone=int(payload.get("movesUndone", 0)),
            score=int(payload.get("score", 0)),
        )


@dataclass
class CustomGameSave:
    """Progress through a player-authored level. Custom games are not scored."""

    level_name: str
    worker: Worker
    boxes: Boxes
    moves_made: int
    moves_undone: int

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"levelName": self.level_name}
        payload.update(_core_payload(self.worker, self.boxes, self.moves_made, self.moves_undone))
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: str) -> CustomGameSave:
        payload = json.loads(data)
        return cls(
            level_name=str(payload["levelName"]),
            worker=Worker.from_dict(payload["worker"]),
            boxes=Boxes.from_dict(payload["boxes"]),
            moves_made=int(payload.get("movesMade", 0)),
            moves_undone=int(payload.get("movesUndone", 0)),
        )


SaveRecord = Union[GameSave, CustomGameSave, Mapping[str, Any]]


class SaveSlots:
    """Named save slots under one key prefix. Records are stored as JSON text
    and handed back unparsed."""

    def __init__(self, store: KeyValueStore, prefix: str) -> None:
        self._slots = Namespace(store, prefix)

    def save(self, name: str, record: SaveRecord) -> None:
        if isinstance(record, (GameSave, CustomGameSave)):
            data = record.to_json()
        else:
            data = json.dumps(dict(record))
        self._slots.put(name, data)
        logger.debug("Saved %r under %s", name, self._slots.prefix)

    def list_all(self) -> List[StoredEntry]:
        return self._slots.entries()


class ProgressStore:
    """Saved games for the numbered-levels mode (``save/``) and the custom-levels
    mode (``custom_save/``). Saving under an existing name overwrites it."""

    def __init__(self, store: KeyValueStore) -> None:
        self.games = SaveSlots(store, SAVED_GAME_PREFIX)
        self.custom_games = SaveSlots(store, CUSTOM_SAVE_PREFIX)

    def save_game(
        self,
        game_name: str,
        current_level: int,
        worker: Worker,
        boxes: Boxes,
        moves_made: int,
        moves_undone: int,
        score: int,
    ) -> None:
        self.games.save(
            game_name,
            GameSave(current_level, worker, boxes, moves_made, moves_undone, score),
        )

    def save_custom_game(
        self,
        game_name: str,
        level_name: str,
        worker: Worker,
        boxes: Boxes,
        moves_made: int,
        moves_undone: int,
    ) -> None:
        self.custom_games.save(
            game_name,
            CustomGameSave(level_name, worker, boxes, moves_made, moves_undone),
        )

    def read_games(self) -> List[StoredEntry]:
        return self.games.list_all()

    def read_custom_games(self) -> List[StoredEntry]:
        return self.custom_games.list_all()


class Scoreboard:
    """Best score per player under ``scoreboard/<player>``.

    Only the key prefix and the board length come from the game's saved-data
    layout. Keeping one best score per player and ranking by score, then by
    name, is this package's own policy."""

    def __init__(self, store: KeyValueStore, length: int = SCOREBOARD_LENGTH) -> None:
        self._scores = Namespace(store, SCOREBOARD_PREFIX)
        self._length = length

    def best(self, player: str) -> Optional[int]:
        data = self._scores.get(player)
        if data is None:
            return None
        return self._parse(player, data)

    def record(self, player: str, score: int) -> int:
        """Keep the higher of ``score`` and the player's stored best. Returns the best."""
        current = self.best(player)
        best = score if current is None else max(current, score)
        if best != current:
            self._scores.put(player, json.dumps(best))
        return best

    def top(self) -> List[Tuple[str, int]]:
        scores: List[Tuple[str, int]] = []
        for entry in self._scores.entries():
            score = self._parse(entry.name, entry.data)
            if score is not None:
                scores.append((entry.name, score))
        scores.sort(key=lambda item: (-item[1], item[0]))
        return scores[: self._length]

    def _parse(self, player: str, data: str) -> Optional[int]:
        try:
            return int(json.loads(data))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable score for %r: %s", player, e)
            return None
