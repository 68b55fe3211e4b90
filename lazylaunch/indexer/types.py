"""Domain datatypes for indexed launch targets and the persisted index."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AppEntry:
    """One launchable target discovered during a scan."""

    name: str
    target_path: str
    is_folder: bool = False

    @property
    def dedup_key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class IndexCache:
    """Snapshot of a full scan tagged with the config hash it was built for."""

    version: int
    created_at: float
    entries: tuple[AppEntry, ...] = field(default_factory=tuple)
    config_hash: int = 0


def entries_equal(a: tuple[AppEntry, ...] | list[AppEntry], b: tuple[AppEntry, ...] | list[AppEntry]) -> bool:
    """Return whether two entry sequences are identical in order and content."""
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


__all__ = ["AppEntry", "IndexCache", "entries_equal"]
