"""Local filesystem helpers for the sync session.

This module provides:
- enumerate_files: List every regular file under the sync folder
- ensure_dir: Create a directory and any missing ancestors

Both walk the tree with an explicit worklist instead of recursion, so
deeply nested folders cannot exhaust the call stack.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from foldersync.core.exceptions import FilesystemError
from foldersync.core.manifest import to_relative_path

logger = logging.getLogger(__name__)


def enumerate_files(root: Path) -> list[str]:
    """List all regular files under ``root``.

    Subdirectories are visited in the order the OS lists them; no sorting
    is applied. Directories themselves are never returned.

    Args:
        root: Folder to scan.

    Returns:
        Paths relative to ``root`` with ``/`` separators.

    Raises:
        FilesystemError: If a directory cannot be listed.
    """
    root = Path(root)
    files: list[str] = []
    pending: list[Path] = [root]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            raise FilesystemError(f"Could not open dir {current}: {e}") from e

        subdirs: list[Path] = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
                elif entry.is_file():
                    files.append(to_relative_path(Path(entry.path), root))
            except OSError as e:
                raise FilesystemError(f"Error while reading dir {current}: {e}") from e

        # Reversed so pop() visits subdirectories in listing order
        pending.extend(reversed(subdirs))

    logger.debug(f"Found {len(files)} files under {root}")
    return files


def ensure_dir(path: Path) -> None:
    """Make sure ``path`` exists as a directory, creating ancestors as needed.

    Safe to call repeatedly and when another process creates the same
    directory concurrently.

    Args:
        path: Directory that must exist afterwards.

    Raises:
        FilesystemError: If a component exists but is not a directory, or
            cannot be created.
    """
    path = Path(path)
    missing: list[Path] = []
    current = path
    while not current.is_dir():
        if current.exists():
            raise FilesystemError(f"Not a directory: {current}")
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    for directory in reversed(missing):
        try:
            directory.mkdir()
        except FileExistsError:
            if not directory.is_dir():
                raise FilesystemError(f"Not a directory: {directory}") from None
        except OSError as e:
            raise FilesystemError(f"Could not create directory {directory}: {e}") from e
        else:
            logger.debug(f"Created directory {directory}")
