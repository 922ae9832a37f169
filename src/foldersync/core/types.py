"""Shared types for foldersync.

This module defines the wire opcodes and the session state enum used by
both the frame codec and the client session.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Opcode(IntEnum):
    """Opcodes of the sync wire protocol.

    Values 4-7 and 9-255 are reserved. The codec hands them through as
    raw ints and the session treats them as protocol violations.
    """

    INIT = 0x00
    FILE_PATH = 0x01
    FILE_PART = 0x02
    FILE_END = 0x03
    CLOSE = 0x08

    @classmethod
    def lookup(cls, value: int) -> Opcode | int:
        """Return the matching Opcode, or the raw value if it is reserved."""
        try:
            return cls(value)
        except ValueError:
            return value


class SessionState(str, Enum):
    """Lifecycle state of a client session."""

    CONNECTING = "connecting"
    IDLE = "idle"
    SENDING = "sending"
    RECEIVING = "receiving"
    CLOSED = "closed"
