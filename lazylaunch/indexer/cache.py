"""Persisted index cache keyed on the scan-path configuration hash."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from pathlib import Path

from ..config import Config, hash_paths
from ..errors import FormatMismatch, IndexPersistError, LauncherError, StoreIOError
from ..persistence import binfmt, paths
from .scan import scan_all
from .types import AppEntry, IndexCache

logger = logging.getLogger(__name__)

INDEX_MAGIC = b"SIDX"
INDEX_CACHE_VERSION = 1


def _encode(cache: IndexCache) -> bytes:
    return binfmt.encode_json(
        {
            "version": cache.version,
            "created_at": cache.created_at,
            "config_hash": cache.config_hash,
            "entries": [[entry.name, entry.target_path, entry.is_folder] for entry in cache.entries],
        }
    )


def _decode(payload: bytes, path: Path) -> IndexCache:
    document = binfmt.decode_json(payload, path)
    try:
        entries = tuple(
            AppEntry(name=str(name), target_path=str(target), is_folder=bool(is_folder))
            for name, target, is_folder in document["entries"]
        )
        return IndexCache(
            version=int(document["version"]),
            created_at=float(document["created_at"]),
            entries=entries,
            config_hash=int(document["config_hash"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise FormatMismatch(path, f"index payload has unexpected shape ({exc})") from exc


def read_index(path: Path | None = None) -> IndexCache:
    """Read ``index.bin``. Raises a ``LauncherError`` subclass when unusable."""
    target = path or paths.index_path()
    _version, payload = binfmt.read(target, INDEX_MAGIC, INDEX_CACHE_VERSION)
    return _decode(payload, target)


def write_index(cache: IndexCache, path: Path | None = None) -> None:
    """Persist ``cache`` atomically. Raises ``StoreIOError`` on failure."""
    target = path or paths.index_path()
    binfmt.write(target, INDEX_MAGIC, INDEX_CACHE_VERSION, _encode(cache))


def _build(config: Config, shortcut_sources: Iterable[Path] | None) -> IndexCache:
    entries = scan_all(config.paths, shortcut_sources=shortcut_sources)
    return IndexCache(
        version=INDEX_CACHE_VERSION,
        created_at=time.time(),
        entries=tuple(entries),
        config_hash=hash_paths(config.paths),
    )


def _persist(cache: IndexCache, target: Path) -> None:
    try:
        write_index(cache, target)
    except StoreIOError as exc:
        raise IndexPersistError(target, "cannot save index cache", cache) from exc


def rebuild_and_save(
    config: Config,
    path: Path | None = None,
    shortcut_sources: Iterable[Path] | None = None,
) -> IndexCache:
    """Rescan unconditionally and persist the result.

    Raises ``IndexPersistError`` (carrying the fresh cache) when the write
    fails; the previous file on disk is left intact.
    """
    target = path or paths.index_path()
    cache = _build(config, shortcut_sources)
    _persist(cache, target)
    return cache


def load_or_scan(
    config: Config,
    path: Path | None = None,
    shortcut_sources: Iterable[Path] | None = None,
) -> IndexCache:
    """Return the persisted cache when it matches ``config``, else rescan.

    Any cache-read failure falls back to a full rescan. Only a failure to
    persist the rescanned cache is raised (as ``IndexPersistError``).
    """
    target = path or paths.index_path()
    expected_hash = hash_paths(config.paths)
    try:
        cached = read_index(target)
    except StoreIOError as exc:
        if isinstance(exc.__cause__, FileNotFoundError):
            logger.info("No index cache at %s; scanning", target)
        else:
            logger.warning("Index cache unreadable (%s); rescanning", exc)
    except LauncherError as exc:
        logger.warning("Index cache unusable (%s); rescanning", exc)
    else:
        if cached.version == INDEX_CACHE_VERSION and cached.config_hash == expected_hash:
            return cached
        logger.info("Index cache is stale (config hash changed); rescanning")

    return rebuild_and_save(config, target, shortcut_sources=shortcut_sources)


__all__ = [
    "INDEX_MAGIC",
    "INDEX_CACHE_VERSION",
    "read_index",
    "write_index",
    "rebuild_and_save",
    "load_or_scan",
]
