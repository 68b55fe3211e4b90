"""Launch and folder-expansion usage statistics.

Every mutation is persisted immediately through the binary framing layer.
Each map is pruned to the ``top_n`` highest counts before a save. Equal
counts are resolved in favour of the key touched most recently, tracked with
a logical clock persisted alongside the counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from .errors import FormatMismatch, LauncherError, StoreIOError
from .persistence import binfmt, paths
from .query import normalize_query

logger = logging.getLogger(__name__)

HISTORY_MAGIC = b"HIST"
HISTORY_VERSION = 1
DEFAULT_TOP_N = 200

K = TypeVar("K")


@dataclass
class HistoryData:
    """Usage counters plus the touch ticks used for deterministic pruning."""

    global_counts: dict[str, int] = field(default_factory=dict)
    query_counts: dict[tuple[str, str], int] = field(default_factory=dict)
    folder_expansion_counts: dict[str, int] = field(default_factory=dict)
    clock: int = 0
    global_touched: dict[str, int] = field(default_factory=dict)
    query_touched: dict[tuple[str, str], int] = field(default_factory=dict)
    folder_touched: dict[str, int] = field(default_factory=dict)

    def tick(self) -> int:
        self.clock += 1
        return self.clock


def prune_counts(counts: dict[K, int], touched: dict[K, int], top_n: int) -> None:
    """Keep the ``top_n`` highest counts in place; ties favour the latest touch."""
    top_n = max(0, top_n)
    if len(counts) <= top_n:
        return
    ranked = sorted(counts, key=lambda key: (counts[key], touched.get(key, 0)), reverse=True)
    for key in ranked[top_n:]:
        del counts[key]
        touched.pop(key, None)


def prune(data: HistoryData, top_n: int) -> None:
    """Prune every map of ``data`` to ``top_n`` entries.

    Query counts for paths that fell out of the global counts go with them.
    """
    prune_counts(data.global_counts, data.global_touched, top_n)
    for key in [key for key in data.query_counts if key[1] not in data.global_counts]:
        del data.query_counts[key]
        data.query_touched.pop(key, None)
    prune_counts(data.query_counts, data.query_touched, top_n)
    prune_counts(data.folder_expansion_counts, data.folder_touched, top_n)


def _encode(data: HistoryData) -> bytes:
    return binfmt.encode_json(
        {
            "clock": data.clock,
            "global": [
                [path, count, data.global_touched.get(path, 0)]
                for path, count in data.global_counts.items()
            ],
            "query": [
                [query, path, count, data.query_touched.get((query, path), 0)]
                for (query, path), count in data.query_counts.items()
            ],
            "folder": [
                [path, count, data.folder_touched.get(path, 0)]
                for path, count in data.folder_expansion_counts.items()
            ],
        }
    )


def _count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"invalid count {value!r}")
    return value


def _decode(payload: bytes, path: Path | None = None) -> HistoryData:
    document = binfmt.decode_json(payload, path)
    data = HistoryData()
    try:
        data.clock = _count(document.get("clock", 0))
        for raw_path, count, tick in document.get("global", []):
            data.global_counts[str(raw_path)] = _count(count)
            data.global_touched[str(raw_path)] = _count(tick)
        for query, raw_path, count, tick in document.get("query", []):
            key = (str(query), str(raw_path))
            data.query_counts[key] = _count(count)
            data.query_touched[key] = _count(tick)
        for raw_path, count, tick in document.get("folder", []):
            data.folder_expansion_counts[str(raw_path)] = _count(count)
            data.folder_touched[str(raw_path)] = _count(tick)
    except (AttributeError, TypeError, ValueError) as exc:
        raise FormatMismatch(path, f"history payload has unexpected shape ({exc})") from exc
    return data


def load_history(path: Path | None = None) -> HistoryData:
    """Read ``history.bin``. Raises a ``LauncherError`` subclass when unusable."""
    target = path or paths.history_path()
    _version, payload = binfmt.read(target, HISTORY_MAGIC, HISTORY_VERSION)
    return _decode(payload, target)


def save_history(data: HistoryData, path: Path | None = None) -> None:
    """Persist ``data`` atomically. Raises ``StoreIOError`` on failure."""
    target = path or paths.history_path()
    binfmt.write(target, HISTORY_MAGIC, HISTORY_VERSION, _encode(data))


class HistoryStore:
    """Owned usage statistics bound to one history file."""

    def __init__(self, path: Path | None = None, top_n: int = DEFAULT_TOP_N, data: HistoryData | None = None) -> None:
        self.path = path or paths.history_path()
        self.top_n = max(1, top_n)
        self.data = data if data is not None else HistoryData()

    @classmethod
    def open(cls, path: Path | None = None, top_n: int = DEFAULT_TOP_N) -> HistoryStore:
        """Load a store, degrading to empty history when the file is unreadable."""
        store = cls(path, top_n)
        try:
            store.load()
        except StoreIOError as exc:
            logger.warning("History unavailable (%s); usage boost disabled until next save", exc)
        return store

    def load(self) -> HistoryData:
        """Replace in-memory data with the file contents.

        A missing file yields empty history. A corrupt or foreign file is
        replaced with empty history on disk. Other read failures raise
        ``StoreIOError`` and leave the in-memory data untouched.
        """
        try:
            self.data = load_history(self.path)
        except StoreIOError as exc:
            if not isinstance(exc.__cause__, FileNotFoundError):
                raise
            self.data = HistoryData()
        except LauncherError as exc:
            logger.warning("Discarding unusable history file: %s", exc)
            self.data = HistoryData()
            self.save()
        return self.data

    def prune(self, top_n: int | None = None) -> None:
        prune(self.data, self.top_n if top_n is None else top_n)

    def save(self) -> None:
        """Prune, then persist. Raises ``StoreIOError`` on failure."""
        self.prune()
        save_history(self.data, self.path)

    def record_launch(self, path: str, query: str) -> None:
        """Count a launch of ``path`` globally and for the normalized ``query``."""
        data = self.data
        data.global_counts[path] = data.global_counts.get(path, 0) + 1
        data.global_touched[path] = data.tick()

        normalized = normalize_query(query)
        if normalized:
            key = (normalized, path)
            data.query_counts[key] = data.query_counts.get(key, 0) + 1
            data.query_touched[key] = data.tick()
        self.save()

    def record_folder_expansion(self, folder_path: str) -> None:
        data = self.data
        data.folder_expansion_counts[folder_path] = data.folder_expansion_counts.get(folder_path, 0) + 1
        data.folder_touched[folder_path] = data.tick()
        self.save()

    def global_count(self, path: str) -> int:
        return self.data.global_counts.get(path, 0)

    def query_count(self, query: str, path: str) -> int:
        return self.data.query_counts.get((normalize_query(query), path), 0)

    def folder_expansion_count(self, folder_path: str) -> int:
        return self.data.folder_expansion_counts.get(folder_path, 0)


__all__ = [
    "HISTORY_MAGIC",
    "HISTORY_VERSION",
    "DEFAULT_TOP_N",
    "HistoryData",
    "HistoryStore",
    "prune",
    "prune_counts",
    "load_history",
    "save_history",
]
