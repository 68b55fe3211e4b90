"""Launch-target indexing.

This package contains non-UI indexing primitives:
- entry and cache datatypes
- platform shortcut locations
- filesystem scanning with case-insensitive deduplication
- the persisted, config-hash-tagged index cache
"""

from __future__ import annotations

from .types import AppEntry, IndexCache, entries_equal
from .scan import EntryCollector, scan_all, scan_directory_with_extensions, scan_shortcuts
from .sources import default_shortcut_sources, shortcut_extension
from .cache import (
    INDEX_CACHE_VERSION,
    INDEX_MAGIC,
    load_or_scan,
    read_index,
    rebuild_and_save,
    write_index,
)

__all__ = [
    "AppEntry",
    "IndexCache",
    "entries_equal",
    "EntryCollector",
    "scan_all",
    "scan_directory_with_extensions",
    "scan_shortcuts",
    "default_shortcut_sources",
    "shortcut_extension",
    "INDEX_CACHE_VERSION",
    "INDEX_MAGIC",
    "load_or_scan",
    "read_index",
    "rebuild_and_save",
    "write_index",
]
