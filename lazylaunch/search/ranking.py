"""History-boosted ranking over an index snapshot."""

from __future__ import annotations

import ntpath
from collections.abc import Sequence

from ..config import SearchMode
from ..history import HistoryStore
from ..indexer.types import AppEntry
from ..query import normalize_query, split_query_extension
from .matching import match_score
from .types import SearchResult

GLOBAL_WEIGHT = 5
QUERY_WEIGHT = 20
FOLDER_EXPANSION_WEIGHT = 5


def _file_name(target_path: str) -> str:
    # ntpath splits on both separators, so Windows paths work on every host.
    return ntpath.basename(target_path.rstrip("/\\"))


def recent(history: HistoryStore, limit: int, entries: Sequence[AppEntry]) -> list[SearchResult]:
    """Most-launched indexed entries, count desc then case-insensitive name."""
    by_path: dict[str, AppEntry] = {}
    for entry in entries:
        by_path.setdefault(entry.target_path, entry)

    launched = [
        (count, by_path[path])
        for path, count in history.data.global_counts.items()
        if count > 0 and path in by_path
    ]
    launched.sort(key=lambda item: (-item[0], item[1].name.lower()))
    return [SearchResult.from_entry(entry) for _count, entry in launched[: max(0, limit)]]


class SearchEngine:
    """Ranks one immutable index snapshot; lowercase names are computed once."""

    def __init__(self, entries: Sequence[AppEntry]) -> None:
        self.entries: tuple[AppEntry, ...] = tuple(entries)
        self._lower_names = [entry.name.lower() for entry in self.entries]
        self._lower_file_names: list[str] | None = None

    def _file_names(self) -> list[str]:
        if self._lower_file_names is None:
            self._lower_file_names = [_file_name(entry.target_path).lower() for entry in self.entries]
        return self._lower_file_names

    def search(
        self,
        query: str,
        history: HistoryStore,
        mode: SearchMode = SearchMode.FUZZY,
        max_results: int = 8,
        max_history_display: int = 8,
    ) -> list[SearchResult]:
        normalized = normalize_query(query)
        if not normalized:
            return recent(history, max_history_display, self.entries)

        file_names = self._file_names() if "." in normalized else None
        stem, extension = split_query_extension(normalized)
        stem = stem.rstrip()
        scored: list[tuple[int, str, AppEntry]] = []
        for idx, entry in enumerate(self.entries):
            lower_name = self._lower_names[idx]
            base = match_score(mode, lower_name, normalized)
            if file_names is not None:
                file_score = match_score(mode, file_names[idx], normalized)
                if file_score is not None and (base is None or file_score > base):
                    base = file_score
                if extension is not None and stem and file_names[idx].endswith(extension):
                    stem_score = match_score(mode, lower_name, stem)
                    if stem_score is not None and (base is None or stem_score > base):
                        base = stem_score
            if base is None:
                continue

            combined = (
                base
                + history.global_count(entry.target_path) * GLOBAL_WEIGHT
                + history.query_count(normalized, entry.target_path) * QUERY_WEIGHT
            )
            if entry.is_folder:
                combined += history.folder_expansion_count(entry.target_path) * FOLDER_EXPANSION_WEIGHT
            scored.append((combined, lower_name, entry))

        scored.sort(key=lambda item: (-item[0], item[1]))
        return [SearchResult.from_entry(entry) for _score, _name, entry in scored[: max(0, max_results)]]


def rank(
    query: str,
    entries: Sequence[AppEntry],
    history: HistoryStore,
    mode: SearchMode = SearchMode.FUZZY,
    max_results: int = 8,
    max_history_display: int = 8,
) -> list[SearchResult]:
    """One-shot ranking; hosts that query repeatedly should keep a ``SearchEngine``."""
    return SearchEngine(entries).search(
        query,
        history,
        mode=mode,
        max_results=max_results,
        max_history_display=max_history_display,
    )


__all__ = [
    "GLOBAL_WEIGHT",
    "QUERY_WEIGHT",
    "FOLDER_EXPANSION_WEIGHT",
    "SearchEngine",
    "rank",
    "recent",
]
