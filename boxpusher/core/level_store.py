from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from boxpusher.core.codec import encode
from boxpusher.core.constants import BOARD_DIMENSIONS, CUSTOM_LEVEL_PREFIX, Dimensions
from boxpusher.core.objects import Board, Box, Worker
from boxpusher.core.storage import KeyValueStore, Namespace, StoredEntry

logger = logging.getLogger(__name__)


class LevelStore:
    """Player-authored levels kept as raw level strings under ``level/<name>``."""

    def __init__(self, store: KeyValueStore, dimensions: Dimensions = BOARD_DIMENSIONS) -> None:
        self._levels = Namespace(store, CUSTOM_LEVEL_PREFIX)
        self._dimensions = dimensions

    @property
    def dimensions(self) -> Dimensions:
        return self._dimensions

    def save(self, name: str, raw_level: str) -> None:
        """Store ``raw_level`` under ``name``, replacing any level with that name."""
        self._levels.put(name, raw_level)
        logger.debug("Saved custom level %r", name)

    def save_level(
        self,
        name: str,
        board: Board,
        boxes: Iterable[Box],
        worker: Optional[Worker] = None,
    ) -> str:
        """Encode an edited level and save it. Returns the raw level."""
        raw_level = encode(board, boxes, worker, self._dimensions)
        self.save(name, raw_level)
        return raw_level

    def remove(self, name: str) -> None:
        self._levels.delete(name)
        logger.debug("Removed custom level %r", name)

    def list_all(self) -> List[StoredEntry]:
        return self._levels.entries()
