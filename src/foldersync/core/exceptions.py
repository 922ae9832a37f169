"""Exceptions shared by the frame codec and the client session.

Every failure that ends a session derives from SyncError so the CLI can
report it with a single handler.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base exception for sync errors."""


class TransportError(SyncError):
    """The connection failed or ended in the middle of a frame."""


class ConnectionClosedError(TransportError):
    """The peer closed the connection cleanly at a frame boundary."""


class ProtocolViolationError(SyncError):
    """The peer sent something the state machine does not allow.

    Attributes:
        opcode: Raw opcode value of the offending frame, if any.
    """

    def __init__(self, message: str, opcode: int | None = None) -> None:
        super().__init__(message)
        self.opcode = opcode


class FilesystemError(SyncError):
    """A local filesystem operation needed by the session failed."""
