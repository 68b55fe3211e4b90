"""Search package exports.

Combines match scoring and history-boosted ranking in one import surface.
"""

from __future__ import annotations

from .matching import (
    PREFIX_SCORE,
    SUBSTRING_SCORE,
    fuzzy_score,
    match_score,
    matches,
    prefix_score,
    substring_score,
)
from .ranking import FOLDER_EXPANSION_WEIGHT, GLOBAL_WEIGHT, QUERY_WEIGHT, SearchEngine, rank, recent
from .types import SearchResult

__all__ = [
    "PREFIX_SCORE",
    "SUBSTRING_SCORE",
    "GLOBAL_WEIGHT",
    "QUERY_WEIGHT",
    "FOLDER_EXPANSION_WEIGHT",
    "SearchEngine",
    "SearchResult",
    "fuzzy_score",
    "match_score",
    "matches",
    "prefix_score",
    "substring_score",
    "rank",
    "recent",
]
