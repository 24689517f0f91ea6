from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def default_storage_path() -> Path:
    return Path.home() / ".boxpusher" / "storage.json"


@dataclass(frozen=True)
class StoredEntry:
    name: str
    data: str


class KeyValueStore:
    """Flat string-keyed store. Persists to disk across app restarts.
    File: ~/.boxpusher/storage.json unless another path is given.
    Keys are enumerated in insertion order.

    Every call re-reads the file, so stores opened on the same path share
    one namespace. Writes go to a temporary file that replaces the old one.
    An unparseable file is moved aside to ``<name>.corrupt`` before the
    store starts over empty."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else default_storage_path()
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def corrupt_path(self) -> Path:
        return self._file_path.with_name(self._file_path.name + ".corrupt")

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        """Delete ``key``; a missing key is ignored."""
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)

    def keys(self) -> List[str]:
        return list(self._load())

    def items(self) -> Dict[str, str]:
        return self._load()

    def _load(self) -> Dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not load storage from %s: %s", self._file_path, e)
            return {}
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            self._set_aside(f"invalid JSON ({e})")
            return {}
        if not isinstance(payload, dict):
            self._set_aside("expected a JSON object")
            return {}

        items: Dict[str, str] = {}
        for key, value in payload.items():
            if not isinstance(value, str):
                logger.warning("Skipping non-string value for key %r in %s", key, self._file_path)
                continue
            items[key] = value
        return items

    def _set_aside(self, reason: str) -> None:
        logger.warning(
            "Could not load storage from %s: %s; moving it to %s",
            self._file_path,
            reason,
            self.corrupt_path,
        )
        try:
            self._file_path.replace(self.corrupt_path)
        except OSError as e:
            logger.warning("Could not move %s aside: %s", self._file_path, e)

    def _save(self, items: Dict[str, str]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(items, indent=2), encoding="utf-8")
            tmp_path.replace(self._file_path)
        except OSError as e:
            logger.warning("Could not save storage to %s: %s", self._file_path, e)


class Namespace:
    """A key prefix inside a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore, prefix: str) -> None:
        self._store = store
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def put(self, name: str, value: str) -> None:
        self._store.set_item(self._prefix + name, value)

    def get(self, name: str) -> Optional[str]:
        return self._store.get_item(self._prefix + name)

    def delete(self, name: str) -> None:
        self._store.remove_item(self._prefix + name)

    def entries(self) -> List[StoredEntry]:
        return [
            StoredEntry(name=key[len(self._prefix):], data=value)
            for key, value in self._store.items().items()
            if key.startswith(self._prefix)
        ]
