"""Upward navigation limits: drive roots, UNC shares and the POSIX root."""

from __future__ import annotations

import ntpath
import posixpath


def _looks_windows(path: str) -> bool:
    return "\\" in path or (len(path) >= 2 and path[1] == ":" and path[0].isascii() and path[0].isalpha())


def is_navigation_root(path: str) -> bool:
    """Return whether ``path`` is a drive root, a UNC share root or ``/``."""
    raw = path.strip()
    if not raw:
        return False
    if not _looks_windows(raw):
        return raw.startswith("/") and not raw.strip("/")

    trimmed = raw.replace("/", "\\").rstrip("\\")
    if len(trimmed) == 2:
        return trimmed[0].isascii() and trimmed[0].isalpha() and trimmed[1] == ":"
    if trimmed.startswith("\\\\"):
        parts = [part for part in trimmed[2:].split("\\") if part]
        return len(parts) <= 2
    return False


def parent_for_navigation(path: str) -> str | None:
    """Parent directory of ``path``, or ``None`` when already at a root."""
    if is_navigation_root(path):
        return None
    raw = path.strip()
    if _looks_windows(raw):
        parent = ntpath.dirname(raw.replace("/", "\\").rstrip("\\"))
    else:
        parent = posixpath.dirname(raw.rstrip("/")) or None
    if not parent:
        return None
    return parent


__all__ = ["is_navigation_root", "parent_for_navigation"]
