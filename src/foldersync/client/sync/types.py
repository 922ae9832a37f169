"""Shared types for sync operations.

This module provides:
- TransferType: Direction of a file transfer
- TransferResult: Outcome of one Send-File or Receive-File run
- Type alias for the transfer callback

The exception classes live in foldersync.core.exceptions and are
re-exported here next to the transfer types.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from foldersync.core.exceptions import (
    ConnectionClosedError,
    FilesystemError,
    ProtocolViolationError,
    SyncError,
    TransportError,
)


class TransferType(Enum):
    """Direction of a file transfer."""

    UPLOAD = "upload"
    DOWNLOAD = "download"

    @property
    def arrow(self) -> str:
        """Arrow symbol used by the CLI for this direction."""
        return "↑" if self is TransferType.UPLOAD else "↓"


@dataclass
class TransferResult:
    """Result of a single file transfer.

    Attributes:
        path: Relative path of the file.
        transfer_type: Upload (sent to peer) or download (received).
        size: Number of file bytes moved.
        parts: Number of FILE_PART frames.
        complete: False if the file was skipped or cut short.
    """

    path: str
    transfer_type: TransferType
    size: int = 0
    parts: int = 0
    complete: bool = True


# Type alias for transfer completion callback
TransferCallback = Callable[[TransferResult], None]

__all__ = [
    "ConnectionClosedError",
    "FilesystemError",
    "ProtocolViolationError",
    "SyncError",
    "TransferCallback",
    "TransferResult",
    "TransferType",
    "TransportError",
]
