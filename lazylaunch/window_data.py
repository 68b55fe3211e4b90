"""Remembered window positions and the settings window size.

Older payload versions are migrated on read: version 1 held only the search
window position and version 2 had no settings size. Saves always write the
current version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from .errors import FormatMismatch, LauncherError, StoreIOError
from .persistence import binfmt, paths

logger = logging.getLogger(__name__)

WINDOW_MAGIC = b"WNDW"
WINDOW_VERSION = 3


@dataclass(frozen=True)
class WindowPlacement:
    x: int
    y: int


@dataclass(frozen=True)
class WindowSize:
    width: int
    height: int


@dataclass(frozen=True)
class WindowState:
    search: WindowPlacement | None = None
    settings: WindowPlacement | None = None
    settings_size: WindowSize | None = None


def _int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {value!r}")
    return value


def _placement(raw: object) -> WindowPlacement | None:
    if raw is None:
        return None
    return WindowPlacement(x=_int(raw["x"]), y=_int(raw["y"]))


def _size(raw: object) -> WindowSize | None:
    if raw is None:
        return None
    return WindowSize(width=_int(raw["width"]), height=_int(raw["height"]))


def _placement_dict(placement: WindowPlacement | None) -> dict[str, int] | None:
    if placement is None:
        return None
    return {"x": placement.x, "y": placement.y}


def encode_state(state: WindowState) -> bytes:
    size = state.settings_size
    return binfmt.encode_json(
        {
            "search": _placement_dict(state.search),
            "settings": _placement_dict(state.settings),
            "settings_size": None if size is None else {"width": size.width, "height": size.height},
        }
    )


def decode_state(version: int, payload: bytes, path: Path | None = None) -> WindowState:
    """Decode any supported payload version into the current state shape."""
    document = binfmt.decode_json(payload, path)
    try:
        if version <= 1:
            return WindowState(search=_placement(document))
        if version == 2:
            return WindowState(
                search=_placement(document.get("search")),
                settings=_placement(document.get("settings")),
            )
        return WindowState(
            search=_placement(document.get("search")),
            settings=_placement(document.get("settings")),
            settings_size=_size(document.get("settings_size")),
        )
    except (AttributeError, KeyError, TypeError) as exc:
        raise FormatMismatch(path, f"window payload has unexpected shape ({exc})") from exc


class WindowStore:
    """Read-modify-write access to ``window.bin``."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or paths.window_path()

    def load(self) -> WindowState:
        """Current state; an absent or unusable file reads as empty."""
        try:
            version, payload = binfmt.read(self.path, WINDOW_MAGIC, WINDOW_VERSION)
            return decode_state(version, payload, self.path)
        except StoreIOError as exc:
            if not isinstance(exc.__cause__, FileNotFoundError):
                logger.warning("Window placement unreadable: %s", exc)
        except LauncherError as exc:
            logger.warning("Ignoring window placement file: %s", exc)
        return WindowState()

    def save(self, state: WindowState) -> None:
        """Persist ``state``. Raises ``StoreIOError`` on failure."""
        binfmt.write(self.path, WINDOW_MAGIC, WINDOW_VERSION, encode_state(state))

    def search_placement(self) -> WindowPlacement | None:
        return self.load().search

    def settings_placement(self) -> WindowPlacement | None:
        return self.load().settings

    def settings_size(self) -> WindowSize | None:
        return self.load().settings_size

    def save_search_placement(self, placement: WindowPlacement) -> None:
        self.save(replace(self.load(), search=placement))

    def save_settings_placement(self, placement: WindowPlacement) -> None:
        self.save(replace(self.load(), settings=placement))

    def save_settings_size(self, size: WindowSize) -> None:
        self.save(replace(self.load(), settings_size=size))


__all__ = [
    "WINDOW_MAGIC",
    "WINDOW_VERSION",
    "WindowPlacement",
    "WindowSize",
    "WindowState",
    "WindowStore",
    "encode_state",
    "decode_state",
]
