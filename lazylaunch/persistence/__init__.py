"""Persistence primitives: binary framing, atomic writes, and file locations."""

from __future__ import annotations

from . import binfmt, paths

__all__ = ["binfmt", "paths"]
