"""Application entry point and setup for the Boxpusher level catalog."""

import asyncio
import logging
import sys
from typing import List

from boxpusher.core.catalog import LevelCatalog
from boxpusher.core.config import Settings, load_settings
from boxpusher.core.level_store import LevelStore
from boxpusher.core.storage import KeyValueStore


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


async def open_catalog(settings: Settings) -> LevelCatalog:
    """Open the persistent store and load every level source."""
    level_store = LevelStore(KeyValueStore(settings.storage_path), settings.dimensions)
    return await LevelCatalog.create(
        level_store,
        difficulty_source=settings.difficulty_source,
        sequence_source=settings.sequence_source,
        dimensions=settings.dimensions,
    )


def summarize(catalog: LevelCatalog) -> List[str]:
    """Human-readable overview of the loaded level pools."""
    lines = [f"{difficulty}: {count} levels" for difficulty, count in catalog.difficulty_sizes().items()]
    lines.append(f"numbered: {catalog.level_count()} levels")
    names = catalog.list_names()
    lines.append(f"custom: {', '.join(names) if names else '(none)'}")
    return lines


def main() -> int:
    configure_logging()
    settings = load_settings()
    catalog = asyncio.run(open_catalog(settings))
    for line in summarize(catalog):
        print(line)
    return 0


def run() -> None:
    """Initialize logging and settings, load the catalog and print its summary."""
    sys.exit(main())
