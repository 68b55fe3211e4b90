"""Platform shortcut locations that every scan includes."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from platformdirs import user_data_dir, user_desktop_dir


def shortcut_extension() -> str:
    """Extension of shortcut files on this platform."""
    return ".lnk" if sys.platform == "win32" else ".desktop"


def _start_menu_dirs() -> list[Path]:
    dirs: list[Path] = []
    for env_var in ("APPDATA", "ProgramData"):
        base = os.environ.get(env_var)
        if base:
            dirs.append(Path(base) / "Microsoft" / "Windows" / "Start Menu" / "Programs")
    return dirs


def _application_dirs() -> list[Path]:
    dirs = [Path(user_data_dir(appauthor=False)) / "applications"]
    raw_data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    dirs.extend(Path(raw) / "applications" for raw in raw_data_dirs.split(os.pathsep) if raw)
    return dirs


def default_shortcut_sources() -> list[Path]:
    """Return Start Menu (or XDG applications) directories followed by the Desktop."""
    sources = _start_menu_dirs() if sys.platform == "win32" else _application_dirs()
    sources.append(Path(user_desktop_dir()))
    unique: list[Path] = []
    for source in sources:
        if source not in unique:
            unique.append(source)
    return unique


__all__ = ["shortcut_extension", "default_shortcut_sources"]
