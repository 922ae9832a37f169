"""Manifest encoding and relative path handling.

A manifest is the newline-joined list of relative file paths carried in an
INIT frame. Paths always use ``/`` separators and never start with the
synced folder's own name.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from foldersync.core.exceptions import ProtocolViolationError


def to_relative_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators."""
    return path.relative_to(root).as_posix()


def encode_manifest(paths: Iterable[str]) -> bytes:
    """Join paths into an INIT payload."""
    return "\n".join(p.replace("\\", "/") for p in paths).encode("utf-8")


def decode_manifest(payload: bytes) -> list[str]:
    """Split an INIT payload into paths.

    An empty payload is an empty list, not a list with one empty path.
    Empty entries are dropped; whitespace-only names are kept.
    """
    if not payload:
        return []
    text = payload.decode("utf-8")
    return [line for line in text.split("\n") if line]


def validate_relative_path(path: str) -> str:
    """Check that a peer-supplied path stays inside the synced folder.

    Args:
        path: Relative path from the wire.

    Returns:
        The path unchanged.

    Raises:
        ProtocolViolationError: If the path is empty, contains a NUL
            byte, is absolute, or has ``..`` components.
    """
    if not path:
        raise ProtocolViolationError("Empty file path")
    if "\x00" in path:
        raise ProtocolViolationError(f"NUL byte not allowed in path: {path!r}")

    posix = PurePosixPath(path.replace("\\", "/"))
    if posix.is_absolute() or (posix.parts and posix.parts[0].endswith(":")):
        raise ProtocolViolationError(f"Absolute paths not allowed: {path!r}")
    if ".." in posix.parts:
        raise ProtocolViolationError(f"Path traversal not allowed: {path!r}")
    return path
