"""Command surface consumed by launcher hosts.

``LauncherCore`` owns the config, the index snapshot, the history store and
the window placement store, each behind its own lock. When several locks are
needed they are taken in that order. Index rebuilds, synchronous or in the
background, run one at a time under a separate build lock that is always
taken first.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from . import launcher
from .config import Config, hash_paths, load_config, save_config
from .errors import IndexPersistError, StoreIOError
from .folder import FolderNavigator, SearchSession
from .folder import list_folder as list_folder_children
from .history import HistoryStore
from .index_build import IndexBuildScheduler
from .indexer import IndexCache, entries_equal, load_or_scan, rebuild_and_save
from .indexer.types import AppEntry
from .persistence import paths
from .search import SearchEngine, SearchResult, recent
from .window_data import WindowPlacement, WindowSize, WindowStore

logger = logging.getLogger(__name__)


class RequestTracker:
    """Monotonic request ids so hosts can drop stale result sets."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest = 0

    def next(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest

    def is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest


class LauncherCore:
    """Thread-safe facade over config, index, history and window stores."""

    def __init__(
        self,
        config_path: Path | None = None,
        data_dir: Path | None = None,
        shortcut_sources: Iterable[Path] | None = None,
        opener: launcher.Opener | None = None,
    ) -> None:
        base = data_dir or paths.data_dir()
        self.config_path = config_path or paths.config_path(base)
        self.index_path = paths.index_path(base)
        self.history_path = paths.history_path(base)
        self._shortcut_sources = None if shortcut_sources is None else list(shortcut_sources)
        self._opener = opener

        self._build_lock = threading.Lock()
        self._config_lock = threading.Lock()
        self._index_lock = threading.Lock()
        self._history_lock = threading.Lock()
        self._window_lock = threading.Lock()

        self._config = load_config(self.config_path)
        self._history = HistoryStore.open(self.history_path, top_n=self._config.appearance.top_n_history)
        self._windows = WindowStore(paths.window_path(base))
        self._index = self._load_index(self._config)
        self._engine = SearchEngine(self._index.entries)

        self.requests = RequestTracker()
        self.index_builder = IndexBuildScheduler(self._build_index)

    # Index

    def _load_index(self, config: Config) -> IndexCache:
        try:
            return load_or_scan(config, self.index_path, shortcut_sources=self._shortcut_sources)
        except IndexPersistError as exc:
            logger.warning("Using unsaved index: %s", exc)
            return exc.cache

    def _build_index(self, _requested: Config | None = None) -> IndexCache:
        """Scan, persist and install under the build lock.

        The live config is read once the lock is held, so a queued request
        always builds for the paths saved last.
        """
        with self._build_lock:
            config = self.get_config()
            try:
                cache = rebuild_and_save(config, self.index_path, shortcut_sources=self._shortcut_sources)
            except IndexPersistError as exc:
                logger.warning("Rebuilt index could not be saved: %s", exc)
                cache = exc.cache
            self._install_index(cache)
        return cache

    def _install_index(self, cache: IndexCache) -> bool:
        with self._config_lock:
            current_hash = hash_paths(self._config.paths)
        if cache.config_hash != current_hash:
            logger.info("Dropping index built for replaced scan paths")
            return False
        with self._index_lock:
            changed = not entries_equal(self._index.entries, cache.entries)
            self._index = cache
            self._engine = SearchEngine(cache.entries)
        logger.info("Index now holds %d entries (%s)", len(cache.entries), "changed" if changed else "unchanged")
        return True

    def entries(self) -> tuple[AppEntry, ...]:
        with self._index_lock:
            return self._index.entries

    def rebuild_index(self) -> IndexCache:
        """Rescan synchronously and swap the new snapshot in.

        Waits for any running rebuild. A failed save is logged; the fresh scan
        is still used in memory. A scan whose paths were replaced while it ran
        is returned but not installed.
        """
        return self._build_index()

    def rebuild_index_async(self) -> int:
        """Queue a background rebuild; returns its request id."""
        return self.index_builder.schedule(self.get_config())

    # Search

    def search(self, query: str, max_results: int | None = None) -> list[SearchResult]:
        """Rank ``query``; ``max_results`` overrides ``appearance.max_results``."""
        with self._config_lock:
            mode = self._config.search.normal_mode
            if max_results is None:
                max_results = self._config.appearance.max_results
            max_history_display = self._config.appearance.max_history_display
        with self._index_lock, self._history_lock:
            return self._engine.search(
                query,
                self._history,
                mode=mode,
                max_results=max_results,
                max_history_display=max_history_display,
            )

    def get_history_results(self) -> list[SearchResult]:
        with self._config_lock:
            limit = self._config.appearance.max_history_display
        with self._index_lock, self._history_lock:
            return recent(self._history, limit, self._engine.entries)

    def list_folder(self, directory: str, filter_text: str = "") -> list[SearchResult]:
        with self._config_lock:
            mode = self._config.search.folder_mode
            show_hidden_system = self._config.search.show_hidden_system
            max_results = self._config.appearance.max_results
        with self._history_lock:
            return list_folder_children(
                directory,
                filter_text,
                mode=mode,
                show_hidden_system=show_hidden_system,
                history=self._history,
                max_results=max_results,
            )

    # History

    def launch_item(self, path: str, query: str = "", dry_run: bool = False) -> None:
        """Record the launch, then open ``path``.

        History failures are logged and never block the launch. Raises
        ``LaunchFailed`` when the shell cannot open the target.
        """
        with self._history_lock:
            try:
                self._history.record_launch(path, query)
            except StoreIOError as exc:
                logger.warning("Launch of %s not recorded: %s", path, exc)
        if not dry_run:
            launcher.launch(path, opener=self._opener)

    def record_folder_expansion(self, directory: str) -> None:
        """Count one expansion of ``directory``. Raises ``StoreIOError`` on save failure."""
        with self._history_lock:
            self._history.record_folder_expansion(directory)

    # Sessions

    def new_session(self) -> SearchSession:
        """Fresh flat session showing recent launches."""
        return SearchSession(results=self.get_history_results())

    def navigator(self) -> FolderNavigator:
        return FolderNavigator(
            list_folder=self.list_folder,
            search=self.search,
            record_expansion=self.record_folder_expansion,
        )

    # Config

    def get_config(self) -> Config:
        with self._config_lock:
            return copy.deepcopy(self._config)

    def save_config(self, config: Config, background: bool = False) -> bool:
        """Persist and apply ``config``; returns whether the index is rebuilt.

        Raises ``StoreIOError`` when the file cannot be written, in which case
        the running config is left unchanged.
        """
        with self._config_lock:
            paths_changed = hash_paths(self._config.paths) != hash_paths(config.paths)
            save_config(config, self.config_path)
            self._config = copy.deepcopy(config)
        with self._history_lock:
            self._history.top_n = max(1, config.appearance.top_n_history)

        if not paths_changed:
            return False
        if background:
            self.index_builder.schedule(copy.deepcopy(config))
        else:
            self.rebuild_index()
        return True

    # Window placement

    def get_search_placement(self) -> WindowPlacement | None:
        with self._window_lock:
            return self._windows.search_placement()

    def get_settings_placement(self) -> tuple[WindowPlacement | None, WindowSize | None]:
        with self._window_lock:
            state = self._windows.load()
        return state.settings, state.settings_size

    def _save_window(self, action: str, save: Callable[[], None]) -> bool:
        with self._window_lock:
            try:
                save()
            except StoreIOError as exc:
                logger.warning("Could not save %s: %s", action, exc)
                return False
        return True

    def save_search_placement(self, x: int, y: int) -> bool:
        return self._save_window(
            "search window placement",
            lambda: self._windows.save_search_placement(WindowPlacement(x=x, y=y)),
        )

    def save_settings_placement(self, x: int, y: int) -> bool:
        return self._save_window(
            "settings window placement",
            lambda: self._windows.save_settings_placement(WindowPlacement(x=x, y=y)),
        )

    def save_settings_size(self, width: int, height: int) -> bool:
        return self._save_window(
            "settings window size",
            lambda: self._windows.save_settings_size(WindowSize(width=width, height=height)),
        )


__all__ = ["RequestTracker", "LauncherCore"]
