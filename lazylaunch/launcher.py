"""Open a launch target through the desktop shell."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Callable

from .errors import LaunchFailed

logger = logging.getLogger(__name__)

Opener = Callable[[str], None]


def shell_open(path: str) -> None:
    """Open ``path`` the way double-clicking it in the file manager would."""
    if sys.platform == "win32":
        os.startfile(path)
    elif sys.platform == "darwin":
        subprocess.Popen(["open", path])
    else:
        subprocess.Popen(["xdg-open", path])


def launch(path: str, opener: Opener | None = None) -> None:
    """Open ``path``. Raises ``LaunchFailed`` when the shell cannot start it."""
    open_target = opener or shell_open
    try:
        open_target(path)
    except OSError as exc:
        raise LaunchFailed(path, exc) from exc
    logger.info("Launched %s", path)


__all__ = ["Opener", "shell_open", "launch"]
