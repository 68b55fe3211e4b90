"""Directory listing for folder-expansion mode."""

from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path

from ..config import SearchMode
from ..history import HistoryStore
from ..query import normalize_query
from ..search.matching import matches
from ..search.types import SearchResult

logger = logging.getLogger(__name__)

UNREADABLE_FOLDER_LABEL = "Cannot open folder"

_HIDDEN_OR_SYSTEM = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0x2) | getattr(stat, "FILE_ATTRIBUTE_SYSTEM", 0x4)


def is_hidden_or_system(child: os.DirEntry[str]) -> bool:
    """Windows hidden/system attributes; dot-files on other platforms."""
    if sys.platform != "win32":
        return child.name.startswith(".")
    try:
        attributes = child.stat().st_file_attributes
    except (OSError, AttributeError):
        return False
    return bool(attributes & _HIDDEN_OR_SYSTEM)


def list_folder(
    directory: Path | str,
    filter_text: str = "",
    mode: SearchMode = SearchMode.FUZZY,
    show_hidden_system: bool = False,
    history: HistoryStore | None = None,
    max_results: int = 8,
) -> list[SearchResult]:
    """List direct children of ``directory`` matching ``filter_text``.

    Folders sort before files, then by folder-expansion count descending, then
    by case-insensitive name. An unreadable directory yields one error row
    whose path is the directory itself.
    """
    directory = Path(directory)
    needle = normalize_query(filter_text)
    results: list[SearchResult] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                if not show_hidden_system and is_hidden_or_system(child):
                    continue
                if needle and not matches(mode, child.name, needle):
                    continue
                try:
                    is_dir = child.is_dir()
                except OSError:
                    is_dir = False
                results.append(SearchResult(name=child.name, path=child.path, is_folder=is_dir))
    except OSError as exc:
        logger.warning("Cannot list %s: %s", directory, exc)
        return [SearchResult(name=UNREADABLE_FOLDER_LABEL, path=str(directory), is_error=True)]

    def expansion_count(result: SearchResult) -> int:
        if history is None or not result.is_folder:
            return 0
        return history.folder_expansion_count(result.path)

    results.sort(key=lambda item: (not item.is_folder, -expansion_count(item), item.name.lower()))
    return results[: max(0, max_results)]


__all__ = ["UNREADABLE_FOLDER_LABEL", "is_hidden_or_system", "list_folder"]
