"""Pytest fixtures shared by the foldersync tests.

A connected ``socket.socketpair()`` stands in for the network: the client
side is wrapped in a Connection and handed to the code under test, the
peer side is driven by the test like a sync server would.
"""

from __future__ import annotations

import socket
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import pytest

from foldersync.client.connection import Connection
from foldersync.core.exceptions import ConnectionClosedError
from foldersync.core.frame import Frame, read_exact, read_frame, write_frame
from foldersync.core.types import Opcode


@dataclass
class Peer:
    """Server end of a socket pair."""

    sock: socket.socket

    def send(self, opcode: int, payload: bytes = b"") -> None:
        """Queue one frame for the client."""
        write_frame(self.sock, opcode, payload)

    def send_text(self, opcode: int, text: str) -> None:
        """Queue one frame with a UTF-8 payload."""
        self.send(opcode, text.encode("utf-8"))

    def send_file(self, path: str, parts: list[bytes]) -> None:
        """Queue a complete FILE_PATH / FILE_PART* / FILE_END transfer."""
        self.send_text(Opcode.FILE_PATH, path)
        for part in parts:
            self.send(Opcode.FILE_PART, part)
        self.send_text(Opcode.FILE_END, path)

    def finish(self) -> None:
        """Stop writing; the client sees end of stream after queued frames."""
        self.sock.shutdown(socket.SHUT_WR)

    def read_raw(self, size: int) -> bytes:
        """Read unframed bytes, e.g. the API key."""
        return read_exact(self.sock, size)

    def read_frame(self) -> Frame:
        """Read the next frame sent by the client."""
        return read_frame(self.sock)

    def read_all_frames(self) -> list[Frame]:
        """Read frames until the client side is closed or shut down."""
        frames: list[Frame] = []
        while True:
            try:
                frames.append(read_frame(self.sock))
            except ConnectionClosedError:
                return frames


@pytest.fixture
def socket_pair() -> Generator[tuple[Connection, Peer], None, None]:
    """Client Connection and server Peer joined by a socket pair."""
    client_sock, server_sock = socket.socketpair()
    connection = Connection(client_sock)
    peer = Peer(server_sock)
    yield connection, peer
    connection.close()
    server_sock.close()


@pytest.fixture
def sync_root(tmp_path: Path) -> Path:
    """Empty sync folder."""
    root = tmp_path / "shared"
    root.mkdir()
    return root

