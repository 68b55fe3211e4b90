"""Error taxonomy shared by the persisted stores, indexer and config layer.

Every failure that can leave the core is a ``LauncherError`` so hosts can
catch one type and degrade instead of crashing.
"""

from __future__ import annotations

from pathlib import Path


class LauncherError(Exception):
    """Base class for recoverable launcher-core failures."""


class StoreIOError(LauncherError):
    """Filesystem read/write failure on a persisted store."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class IndexPersistError(StoreIOError):
    """Index cache could not be written; ``cache`` still holds the fresh scan."""

    def __init__(self, path: Path, message: str, cache: object) -> None:
        self.cache = cache
        super().__init__(path, message)


class FormatMismatch(LauncherError):
    """Binary file is truncated, foreign, or its payload does not decode."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = f" ({self.path})" if self.path is not None else ""
        super().__init__(f"format mismatch{where}: {reason}")


class UnsupportedVersion(LauncherError):
    """Binary file was written by a newer build than this one understands."""

    def __init__(self, path: Path | None, version: int, max_version: int) -> None:
        self.path = Path(path) if path is not None else None
        self.version = version
        self.max_version = max_version
        super().__init__(f"unsupported version {version} (max {max_version})")


class ConfigInvalid(LauncherError):
    """Config text or one of its fields could not be used as written."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"invalid config value for {field!r}: {reason}")


class ScanRootUnreadable(LauncherError):
    """One scan root could not be enumerated. Never fatal to a scan."""

    def __init__(self, root: Path, cause: OSError) -> None:
        self.root = Path(root)
        self.cause = cause
        super().__init__(f"cannot read scan root {self.root}: {cause}")


class LaunchFailed(LauncherError):
    """The OS shell refused to open a target."""

    def __init__(self, target: str, cause: OSError) -> None:
        self.target = target
        self.cause = cause
        super().__init__(f"cannot open {target}: {cause}")


__all__ = [
    "LauncherError",
    "StoreIOError",
    "IndexPersistError",
    "FormatMismatch",
    "UnsupportedVersion",
    "ConfigInvalid",
    "ScanRootUnreadable",
    "LaunchFailed",
]
