from __future__ import annotations

import asyncio
import enum
import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from boxpusher.core.codec import decode
from boxpusher.core.constants import (
    BOARD_DIMENSIONS,
    DIFFICULTIES,
    DIFFICULTY_SOURCE,
    SEQUENCE_SOURCE,
    Dimensions,
)
from boxpusher.core.errors import (
    CatalogLoadError,
    CatalogNotReadyError,
    EmptyPoolError,
    LevelNotFoundError,
)
from boxpusher.core.level_store import LevelStore
from boxpusher.core.objects import StructuredLevel

logger = logging.getLogger(__name__)


class CatalogState(enum.Enum):
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    raw_data: str


@dataclass(frozen=True)
class CatalogLevel:
    """A selected level: its name and the decoded board, worker and boxes."""

    name: str
    level: StructuredLevel


class DifficultyPool:
    """Built-in levels bucketed by difficulty; selection is uniformly random."""

    def __init__(self, buckets: Dict[str, List[CatalogEntry]], rng: random.Random) -> None:
        self._buckets = buckets
        self._rng = rng

    def select(self, difficulty: str) -> CatalogEntry:
        if difficulty not in self._buckets:
            raise ValueError(f"Unknown difficulty {difficulty!r}; expected one of {', '.join(self._buckets)}")
        bucket = self._buckets[difficulty]
        if not bucket:
            raise EmptyPoolError(f"No levels with difficulty {difficulty!r}")
        return bucket[self._rng.randrange(len(bucket))]

    def sizes(self) -> Dict[str, int]:
        return {difficulty: len(bucket) for difficulty, bucket in self._buckets.items()}


class SequencePool:
    """Built-in levels addressed by level number. Numbers past the end stay on the last level."""

    def __init__(self, entries: List[CatalogEntry]) -> None:
        self._entries = entries

    def __len__(self) -> int:
        return len(self._entries)

    def select(self, number: int) -> CatalogEntry:
        if number < 0:
            raise ValueError(f"Level number must not be negative, got {number}")
        if not self._entries:
            raise EmptyPoolError("No numbered levels loaded")
        return self._entries[min(number, len(self._entries) - 1)]


class NamedPool:
    """Custom levels addressed by exact name."""

    def __init__(self, entries: Iterable[CatalogEntry]) -> None:
        self._entries = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def select(self, name: str) -> CatalogEntry:
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise LevelNotFoundError(name)

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]


class LevelCatalog:
    """All playable levels: built-in by difficulty, built-in by number and
    player-authored.

    Custom levels are read when the catalog is created. The built-in levels
    are loaded by awaiting :meth:`load` (or use :meth:`create`); selecting a
    level before that raises :class:`CatalogNotReadyError`.
    """

    def __init__(
        self,
        level_store: LevelStore,
        difficulty_source: Path = DIFFICULTY_SOURCE,
        sequence_source: Path = SEQUENCE_SOURCE,
        dimensions: Dimensions = BOARD_DIMENSIONS,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._level_store = level_store
        self._difficulty_source = Path(difficulty_source)
        self._sequence_source = Path(sequence_source)
        self._dimensions = dimensions
        self._rng = rng or random.Random()
        self._state = CatalogState.LOADING
        self._ready = asyncio.Event()
        self._load_started = False
        self._by_difficulty = DifficultyPool({difficulty: [] for difficulty in DIFFICULTIES}, self._rng)
        self._by_number = SequencePool([])
        self._custom = NamedPool([])
        self.refresh_custom()

    @classmethod
    async def create(cls, level_store: LevelStore, **kwargs: Any) -> LevelCatalog:
        """Build a catalog and wait until its built-in levels are loaded."""
        catalog = cls(level_store, **kwargs)
        await catalog.load()
        return catalog

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is CatalogState.READY

    async def wait_ready(self) -> None:
        await self._ready.wait()

    async def load(self) -> None:
        """Load both bundled level sources concurrently, then become ready.

        Any failure leaves the catalog loading and raises :class:`CatalogLoadError`.
        """
        if self._load_started:
            raise RuntimeError("Built-in levels are loaded only once per catalog")
        self._load_started = True

        try:
            difficulty_doc, sequence_doc = await asyncio.gather(
                _read_json(self._difficulty_source),
                _read_json(self._sequence_source),
            )
            buckets = self._difficulty_buckets(difficulty_doc)
            sequence = self._sequence_entries(sequence_doc)
        except (OSError, ValueError) as e:
            raise CatalogLoadError(f"Could not load built-in levels: {e}") from e

        self._by_difficulty = DifficultyPool(buckets, self._rng)
        self._by_number = SequencePool(sequence)
        self._state = CatalogState.READY
        self._ready.set()
        logger.info(
            "Loaded built-in levels: %s by difficulty, %d numbered",
            self._by_difficulty.sizes(),
            len(self._by_number),
        )

    def refresh_custom(self) -> None:
        """Re-read custom levels from the level store."""
        self._custom = NamedPool(
            CatalogEntry(name=entry.name, raw_data=entry.data) for entry in self._level_store.list_all()
        )
        logger.info("Loaded %d custom levels", len(self._custom))

    def by_difficulty(self, difficulty: str) -> CatalogLevel:
        self._require_ready()
        return self._to_level(self._by_difficulty.select(difficulty))

    def by_number(self, number: int) -> CatalogLevel:
        self._require_ready()
        return self._to_level(self._by_number.select(number))

    def by_name(self, name: str) -> CatalogLevel:
        self._require_ready()
        return self._to_level(self._custom.select(name))

    def list_names(self) -> List[str]:
        return self._custom.names()

    def difficulty_sizes(self) -> Dict[str, int]:
        self._require_ready()
        return self._by_difficulty.sizes()

    def level_count(self) -> int:
        self._require_ready()
        return len(self._by_number)

    def _require_ready(self) -> None:
        if self._state is not CatalogState.READY:
            raise CatalogNotReadyError("Built-in levels are still loading")

    def _to_level(self, entry: CatalogEntry) -> CatalogLevel:
        return CatalogLevel(name=entry.name, level=decode(entry.raw_data, self._dimensions))

    def _difficulty_buckets(self, document: Any) -> Dict[str, List[CatalogEntry]]:
        if not isinstance(document, dict):
            raise ValueError(f"{self._difficulty_source.name}: expected a JSON object")
        buckets: Dict[str, List[CatalogEntry]] = {}
        for difficulty in DIFFICULTIES:
            levels = document.get(difficulty)
            if not isinstance(levels, dict):
                raise ValueError(f"{self._difficulty_source.name}: missing or invalid {difficulty!r}")
            buckets[difficulty] = self._entries(self._difficulty_source, levels)
        return buckets

    def _sequence_entries(self, document: Any) -> List[CatalogEntry]:
        if not isinstance(document, dict):
            raise ValueError(f"{self._sequence_source.name}: expected a JSON object")
        return self._entries(self._sequence_source, document)

    def _entries(self, source: Path, levels: Dict[str, Any]) -> List[CatalogEntry]:
        entries: List[CatalogEntry] = []
        for name, raw_data in levels.items():
            if not isinstance(raw_data, str):
                raise ValueError(f"{source.name}: level {name!r} is not a string")
            if len(raw_data) != self._dimensions.cells:
                logger.warning(
                    "%s: level %r has %d symbols, expected %d",
                    source.name,
                    name,
                    len(raw_data),
                    self._dimensions.cells,
                )
            entries.append(CatalogEntry(name=name, raw_data=raw_data))
        return entries


async def _read_json(path: Path) -> Any:
    text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return json.loads(text)
