"""Filesystem enumeration of launchable entries.

Scan order is part of the contract: platform shortcut sources, then legacy
``additional`` paths, then configured scan paths in declaration order. The
first entry seen for a lowercased name wins. Directory children are visited
in case-insensitive name order so the survivor is deterministic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..config import PathsConfig, ScanPath
from ..errors import ScanRootUnreadable
from .sources import default_shortcut_sources, shortcut_extension
from .types import AppEntry

logger = logging.getLogger(__name__)


class EntryCollector:
    """Ordered entry list with case-insensitive name deduplication."""

    def __init__(self) -> None:
        self.entries: list[AppEntry] = []
        self._seen: set[str] = set()

    def add(self, entry: AppEntry) -> bool:
        key = entry.dedup_key
        if not key or key in self._seen:
            return False
        self._seen.add(key)
        self.entries.append(entry)
        return True


def _report_unreadable(root: Path, exc: OSError, configured: bool) -> None:
    error = ScanRootUnreadable(root, exc)
    if configured:
        logger.warning("Skipping %s", error)
    else:
        logger.debug("Skipping %s", error)


def scan_shortcuts(root: Path, extension: str, collector: EntryCollector, configured: bool = True) -> None:
    """Recursively collect shortcut files under ``root``."""
    extension = extension.lower()

    def on_error(exc: OSError) -> None:
        failed = Path(exc.filename) if exc.filename else root
        _report_unreadable(failed, exc, configured)

    if not root.is_dir():
        _report_unreadable(root, FileNotFoundError(f"not a directory: {root}"), configured)
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort(key=str.lower)
        for filename in sorted(filenames, key=str.lower):
            path = Path(dirpath) / filename
            if path.suffix.lower() != extension:
                continue
            collector.add(AppEntry(name=path.stem, target_path=str(path), is_folder=False))


def scan_directory_with_extensions(scan_path: ScanPath, collector: EntryCollector) -> None:
    """Collect direct children of one scan root that match its extension set.

    Subdirectories become folder entries when ``include_folders`` is set. The
    scan does not descend into them.
    """
    root = Path(scan_path.path)
    extensions = scan_path.normalized_extensions()
    try:
        with os.scandir(root) as iterator:
            children = sorted(iterator, key=lambda child: child.name.lower())
    except OSError as exc:
        _report_unreadable(root, exc, configured=True)
        return

    for child in children:
        try:
            is_dir = child.is_dir()
        except OSError as exc:
            logger.debug("Skipping unreadable entry %s: %s", child.path, exc)
            continue

        if is_dir:
            if scan_path.include_folders:
                collector.add(AppEntry(name=child.name, target_path=child.path, is_folder=True))
            continue

        path = Path(child.path)
        if path.suffix.lower() in extensions and path.stem:
            collector.add(AppEntry(name=path.stem, target_path=child.path, is_folder=False))


def scan_all(
    paths_config: PathsConfig,
    shortcut_sources: Iterable[Path] | None = None,
    shortcut_ext: str | None = None,
) -> list[AppEntry]:
    """Run a full scan and return deduplicated entries in scan order.

    ``shortcut_sources`` defaults to the platform Start Menu/Desktop
    locations; tests pass an explicit (often empty) list.
    """
    collector = EntryCollector()
    extension = shortcut_ext or shortcut_extension()
    sources = default_shortcut_sources() if shortcut_sources is None else list(shortcut_sources)

    for source in sources:
        scan_shortcuts(Path(source), extension, collector, configured=False)
    for additional in paths_config.additional:
        scan_shortcuts(Path(additional), extension, collector)
    for scan_path in paths_config.scan:
        scan_directory_with_extensions(scan_path, collector)

    logger.info("Indexed %d entries", len(collector.entries))
    return collector.entries


__all__ = ["EntryCollector", "scan_shortcuts", "scan_directory_with_extensions", "scan_all"]
