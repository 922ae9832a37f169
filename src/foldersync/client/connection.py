"""TCP connection to the sync server.

This module provides:
- Connection: Exclusively owned byte stream used by a single Session

The connection is blocking with no timeouts: a stalled peer blocks the
session on its next read or write.
"""

from __future__ import annotations

import contextlib
import logging
import socket
import threading

from foldersync.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class Connection:
    """Blocking byte stream over a connected socket.

    Exposes ``recv``/``sendall`` for the frame codec and guarantees the
    underlying socket is closed exactly once.

    Usage:
        with Connection.open("localhost", 8080) as conn:
            session = Session(conn, root, chunk_size)
            session.connect(api_key)
    """

    def __init__(self, sock: socket.socket) -> None:
        """Wrap an already connected socket.

        Args:
            sock: Connected stream socket. Ownership passes to the Connection.
        """
        self._sock = sock
        self._closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def open(cls, host: str, port: int) -> Connection:
        """Connect to the server.

        Raises:
            TransportError: If the connection cannot be established.
        """
        try:
            sock = socket.create_connection((host, port))
        except OSError as e:
            raise TransportError(f"Could not connect to {host}:{port}: {e}") from e
        # The connect timeout must not leak into the blocking protocol loop
        sock.settimeout(None)
        logger.info(f"Connected to {host}:{port}")
        return cls(sock)

    @property
    def closed(self) -> bool:
        """Whether close() has run."""
        return self._closed

    def recv(self, bufsize: int) -> bytes:
        """Receive up to ``bufsize`` bytes; empty bytes means end of stream."""
        if self._closed:
            raise TransportError("Connection is closed")
        return self._sock.recv(bufsize)

    def sendall(self, data: bytes) -> None:
        """Send all of ``data``, retrying short writes."""
        if self._closed:
            raise TransportError("Connection is closed")
        self._sock.sendall(data)

    def close(self) -> None:
        """Close the socket. Later calls do nothing."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        # Peer may already be gone
        with contextlib.suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        self._sock.close()
        logger.debug("Connection closed")

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
