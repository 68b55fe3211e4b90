from __future__ import annotations

from dataclasses import dataclass

from ..indexer.types import AppEntry


@dataclass(frozen=True)
class SearchResult:
    """One row handed to the presentation layer."""

    name: str
    path: str
    is_folder: bool = False
    is_error: bool = False

    @classmethod
    def from_entry(cls, entry: AppEntry) -> SearchResult:
        return cls(name=entry.name, path=entry.target_path, is_folder=entry.is_folder)
