"""Versioned binary framing shared by every persisted store.

Files are laid out as ``[magic:4][version:u32 little-endian][payload]``.
Writes go through a ``.tmp`` sibling that is renamed over the target, so a
reader sees either the previous file or the new one, never half of it.
"""

from __future__ import annotations

import json
import logging
import os
import struct
from pathlib import Path

from ..errors import FormatMismatch, StoreIOError, UnsupportedVersion

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<4sI")
HEADER_LEN = _HEADER.size


def _check_magic(magic: bytes) -> bytes:
    magic = bytes(magic)
    if len(magic) != 4:
        raise ValueError(f"magic must be exactly 4 bytes, got {len(magic)}")
    return magic


def frame(magic: bytes, version: int, payload: bytes) -> bytes:
    """Prefix ``payload`` with the magic/version header."""
    return _HEADER.pack(_check_magic(magic), version) + bytes(payload)


def unframe(
    data: bytes,
    expected_magic: bytes,
    max_version: int,
    path: Path | None = None,
) -> tuple[int, bytes]:
    """Split a framed blob into ``(version, payload)``.

    Raises ``FormatMismatch`` for short blobs or foreign magic and
    ``UnsupportedVersion`` when ``version`` is newer than ``max_version``.
    """
    expected_magic = _check_magic(expected_magic)
    if len(data) < HEADER_LEN:
        raise FormatMismatch(path, f"file shorter than {HEADER_LEN}-byte header")
    magic, version = _HEADER.unpack_from(data)
    if magic != expected_magic:
        raise FormatMismatch(path, f"magic {magic!r} != {expected_magic!r}")
    if version > max_version:
        raise UnsupportedVersion(path, version, max_version)
    return version, bytes(data[HEADER_LEN:])


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp sibling plus remove-and-rename."""
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_bytes(data)
    except OSError as exc:
        raise StoreIOError(path, f"cannot write temp file ({exc})") from exc
    try:
        if path.exists():
            path.unlink()
        os.replace(tmp_path, path)
    except OSError as exc:
        raise StoreIOError(path, f"cannot replace target ({exc})") from exc


def write(path: Path, magic: bytes, version: int, payload: bytes) -> None:
    """Frame ``payload`` and persist it atomically."""
    atomic_write_bytes(path, frame(magic, version, payload))


def read(path: Path, expected_magic: bytes, max_version: int) -> tuple[int, bytes]:
    """Read a framed file and return ``(version, payload)``."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise StoreIOError(path, f"cannot read ({exc})") from exc
    return unframe(data, expected_magic, max_version, path=path)


def encode_json(document: object) -> bytes:
    """Serialize a JSON-compatible document to compact UTF-8 bytes."""
    return json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_json(payload: bytes, path: Path | None = None) -> object:
    """Decode a JSON payload, mapping any decode failure to ``FormatMismatch``."""
    try:
        return json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise FormatMismatch(path, f"payload is not valid JSON ({exc})") from exc


__all__ = [
    "HEADER_LEN",
    "frame",
    "unframe",
    "atomic_write_bytes",
    "write",
    "read",
    "encode_json",
    "decode_json",
]
