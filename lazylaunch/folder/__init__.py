"""Folder expansion.

This package contains the in-launcher directory browser:
- filtered, history-ordered directory listings
- drive/share/root detection for upward navigation
- the flat/expanded session state machine
"""

from __future__ import annotations

from .listing import UNREADABLE_FOLDER_LABEL, is_hidden_or_system, list_folder
from .roots import is_navigation_root, parent_for_navigation
from .navigator import FolderExpansionState, FolderNavigator, SearchSession

__all__ = [
    "UNREADABLE_FOLDER_LABEL",
    "is_hidden_or_system",
    "list_folder",
    "is_navigation_root",
    "parent_for_navigation",
    "FolderExpansionState",
    "FolderNavigator",
    "SearchSession",
]
