"""Exceptions raised by the level catalog."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for level catalog failures."""


class CatalogLoadError(CatalogError):
    """A bundled level source could not be read or had the wrong shape."""


class CatalogNotReadyError(CatalogError, RuntimeError):
    """A level was requested before the built-in levels finished loading."""


class LevelNotFoundError(CatalogError, KeyError):
    """No custom level with the requested name."""


class EmptyPoolError(CatalogError, LookupError):
    """The selected level pool has no entries."""
