"""Per-user locations of the launcher's persisted files."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazylaunch"
HOME_ENV_VAR = "LAZYLAUNCH_HOME"

CONFIG_FILENAME = "config.toml"
HISTORY_FILENAME = "history.bin"
INDEX_FILENAME = "index.bin"
WINDOW_FILENAME = "window.bin"

DEFAULT_DATA_DIR = Path(user_config_dir(APP_NAME, appauthor=False))


def data_dir() -> Path:
    """Return the data directory, honoring ``LAZYLAUNCH_HOME`` when set."""
    override = os.environ.get(HOME_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_DATA_DIR


def config_path(base: Path | None = None) -> Path:
    return (base or data_dir()) / CONFIG_FILENAME


def history_path(base: Path | None = None) -> Path:
    return (base or data_dir()) / HISTORY_FILENAME


def index_path(base: Path | None = None) -> Path:
    return (base or data_dir()) / INDEX_FILENAME


def window_path(base: Path | None = None) -> Path:
    return (base or data_dir()) / WINDOW_FILENAME


__all__ = [
    "APP_NAME",
    "HOME_ENV_VAR",
    "DEFAULT_DATA_DIR",
    "data_dir",
    "config_path",
    "history_path",
    "index_path",
    "window_path",
]
