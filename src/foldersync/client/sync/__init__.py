"""Sync operations over the framed wire protocol.

Architecture:
    Session → (FileSender | FileReceiver) → frame codec → Connection

Components:
- **Session**: Handshake, manifest, and the protocol loop (state machine)
- **FileSender**: Send-File procedure (FILE_PATH, FILE_PART*, FILE_END)
- **FileReceiver**: Receive-File procedure, writes parts to disk
- **enumerate_files / ensure_dir**: Local filesystem walk and directory creation

All public symbols are re-exported here.
"""

from foldersync.client.sync.download import FileReceiver, IncomingTransfer
from foldersync.client.sync.scanner import ensure_dir, enumerate_files
from foldersync.client.sync.session import Session
from foldersync.client.sync.types import (
    ConnectionClosedError,
    FilesystemError,
    ProtocolViolationError,
    SyncError,
    TransferCallback,
    TransferResult,
    TransferType,
    TransportError,
)
from foldersync.client.sync.upload import FileSender

__all__ = [
    # Session
    "Session",
    # Transfers
    "FileReceiver",
    "FileSender",
    "IncomingTransfer",
    "TransferCallback",
    "TransferResult",
    "TransferType",
    # Filesystem
    "ensure_dir",
    "enumerate_files",
    # Errors
    "ConnectionClosedError",
    "FilesystemError",
    "ProtocolViolationError",
    "SyncError",
    "TransportError",
]
