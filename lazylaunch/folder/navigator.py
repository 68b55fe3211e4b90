"""Folder-expansion state machine over a host-owned search session.

A session is either flat (top-level ranked results) or expanded into one
directory. Expansion keeps a single snapshot of the flat view: entering a
sub-folder while expanded only moves ``current_dir``, and exiting always
restores the original top-level results, selection and query.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from ..errors import LauncherError
from ..search.types import SearchResult
from .roots import parent_for_navigation

logger = logging.getLogger(__name__)

ListFolder = Callable[[str, str], list[SearchResult]]
RunSearch = Callable[[str], list[SearchResult]]
RecordExpansion = Callable[[str], None]


@dataclass(frozen=True)
class FolderExpansionState:
    """Directory being browsed plus the flat view to restore on exit."""

    current_dir: str
    saved_results: tuple[SearchResult, ...]
    saved_selected: int
    saved_query: str


@dataclass
class SearchSession:
    """Per-window view state; the host owns it and passes it to every call."""

    query: str = ""
    results: list[SearchResult] = field(default_factory=list)
    selected: int = 0
    expansion: FolderExpansionState | None = None

    @property
    def is_expanded(self) -> bool:
        return self.expansion is not None

    @property
    def current_dir(self) -> str | None:
        return self.expansion.current_dir if self.expansion is not None else None

    def selected_result(self) -> SearchResult | None:
        if 0 <= self.selected < len(self.results):
            return self.results[self.selected]
        return None


def _clamp(selected: int, count: int) -> int:
    if count <= 0:
        return 0
    return min(max(0, selected), count - 1)


class FolderNavigator:
    """Apply navigation transitions to a ``SearchSession``.

    Listing, searching and history recording are injected so the caller
    decides which locks and stores back them.
    """

    def __init__(
        self,
        list_folder: ListFolder,
        search: RunSearch,
        record_expansion: RecordExpansion | None = None,
    ) -> None:
        self._list_folder = list_folder
        self._search = search
        self._record_expansion = record_expansion

    def _record(self, directory: str) -> None:
        if self._record_expansion is None:
            return
        try:
            self._record_expansion(directory)
        except LauncherError as exc:
            logger.warning("Could not record folder expansion for %s: %s", directory, exc)

    def _show(self, session: SearchSession, directory: str) -> None:
        session.query = ""
        session.results = self._list_folder(directory, "")
        session.selected = 0

    def enter(self, session: SearchSession, directory: str) -> None:
        """Browse ``directory``; snapshot the flat view when not yet expanded."""
        if session.expansion is None:
            session.expansion = FolderExpansionState(
                current_dir=directory,
                saved_results=tuple(session.results),
                saved_selected=session.selected,
                saved_query=session.query,
            )
        else:
            session.expansion = replace(session.expansion, current_dir=directory)
        self._record(directory)
        self._show(session, directory)

    def exit(self, session: SearchSession) -> bool:
        """Restore the flat snapshot. Returns ``False`` when not expanded."""
        expansion = session.expansion
        if expansion is None:
            return False
        session.results = list(expansion.saved_results)
        session.selected = expansion.saved_selected
        session.query = expansion.saved_query
        session.expansion = None
        return True

    def navigate_up(self, session: SearchSession) -> bool:
        """Move to the parent directory; a no-op at a root or when flat."""
        expansion = session.expansion
        if expansion is None:
            return False
        parent = parent_for_navigation(expansion.current_dir)
        if parent is None:
            return False
        session.expansion = replace(expansion, current_dir=parent)
        self._show(session, parent)
        return True

    def enter_parent_of_selected(self, session: SearchSession) -> bool:
        """Browse the folder that contains the selected result.

        While expanded this behaves like ``navigate_up``.
        """
        if session.expansion is not None:
            return self.navigate_up(session)
        selected = session.selected_result()
        if selected is None or selected.is_error:
            return False
        parent = parent_for_navigation(selected.path)
        if parent is None:
            return False
        self.enter(session, parent)
        return True

    def enter_selected(self, session: SearchSession) -> bool:
        """Browse the selected result when it is a folder."""
        selected = session.selected_result()
        if selected is None or not selected.is_folder or selected.is_error:
            return False
        self.enter(session, selected.path)
        return True

    def refresh(self, session: SearchSession, query: str) -> None:
        """Re-run the current listing or search with ``query``; clamps selection."""
        session.query = query
        if session.expansion is not None:
            session.results = self._list_folder(session.expansion.current_dir, query)
        else:
            session.results = self._search(query)
        session.selected = _clamp(session.selected, len(session.results))

    def move_selection(self, session: SearchSession, delta: int) -> int:
        session.selected = _clamp(session.selected + delta, len(session.results))
        return session.selected


__all__ = ["FolderExpansionState", "SearchSession", "FolderNavigator"]
