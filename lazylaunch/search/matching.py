"""Three-tier name matching.

All scorers expect the candidate and the query already lowercased; they return
``None`` when the candidate does not match.
"""

from __future__ import annotations

from ..config import SearchMode

PREFIX_SCORE = 10_000
SUBSTRING_SCORE = 5_000
WORD_BOUNDARY_CHARS = "/\\_- ."


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score an in-order subsequence match of ``query`` inside ``candidate``.

    Contiguous runs and hits at the start of a word earn bonuses; gaps and
    long candidates are penalized. Any match scores at least 1.
    """
    if not query:
        return 1

    score = 0
    prev_idx = -1
    run = 0
    for needle in query:
        idx = candidate.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate[idx - 1] in WORD_BOUNDARY_CHARS:
            score += 35
        prev_idx = idx

    score -= len(candidate) // 5
    return max(1, score)


def prefix_score(query: str, candidate: str) -> int | None:
    if not candidate.startswith(query):
        return None
    return PREFIX_SCORE - (len(candidate) - len(query))


def substring_score(query: str, candidate: str) -> int | None:
    idx = candidate.find(query)
    if idx < 0:
        return None
    return SUBSTRING_SCORE - idx


def match_score(mode: SearchMode, candidate: str, query: str) -> int | None:
    """Score ``candidate`` against ``query`` with the tier selected by ``mode``."""
    if mode is SearchMode.PREFIX:
        return prefix_score(query, candidate)
    if mode is SearchMode.SUBSTRING:
        return substring_score(query, candidate)
    return fuzzy_score(query, candidate)


def matches(mode: SearchMode, name: str, query: str) -> bool:
    """Case-insensitive match test used by folder filtering."""
    return match_score(mode, name.lower(), query.lower()) is not None


__all__ = [
    "PREFIX_SCORE",
    "SUBSTRING_SCORE",
    "fuzzy_score",
    "prefix_score",
    "substring_score",
    "match_score",
    "matches",
]
