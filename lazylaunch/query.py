"""Query canonicalization shared by ranking and history bookkeeping."""

from __future__ import annotations

KNOWN_EXTENSIONS = (".exe", ".lnk", ".bat", ".cmd", ".msi", ".com", ".scr", ".ps1")


def normalize_query(query: str) -> str:
    """Trim, collapse whitespace runs to single spaces, and case-fold."""
    return " ".join(query.split()).lower()


def split_query_extension(query: str) -> tuple[str, str | None]:
    """Split a trailing launchable extension off ``query`` when present."""
    for ext in KNOWN_EXTENSIONS:
        if query.endswith(ext):
            return query[: -len(ext)], ext
    return query, None


__all__ = ["KNOWN_EXTENSIONS", "normalize_query", "split_query_extension"]
