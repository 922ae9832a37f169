"""Client session: handshake, manifest exchange, and the protocol loop.

This module provides:
- Session: Owns one connection and drives the transfer state machine

Protocol flow:
    1. Raw API key bytes (unframed)
    2. INIT frame with the local manifest
    3. Loop over incoming frames:
        INIT       -> send every requested file (Send-File)
        FILE_PATH  -> receive one file until FILE_END (Receive-File)
        CLOSE      -> no-op
        otherwise  -> protocol violation, connection closed

Everything runs on the calling thread. A file transfer always finishes
(or fails) before the next frame is dispatched, so frames of different
transfers never interleave.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from foldersync.client.sync.download import FileReceiver
from foldersync.client.sync.scanner import enumerate_files
from foldersync.client.sync.types import TransferCallback, TransferResult
from foldersync.client.sync.upload import FileSender
from foldersync.core.exceptions import (
    ConnectionClosedError,
    ProtocolViolationError,
    TransportError,
)
from foldersync.core.frame import Frame, read_frame, write_frame
from foldersync.core.manifest import decode_manifest, encode_manifest
from foldersync.core.types import Opcode, SessionState

if TYPE_CHECKING:
    from foldersync.client.connection import Connection

logger = logging.getLogger(__name__)


class Session:
    """State owned by this endpoint for the lifetime of one connection.

    The session takes ownership of the connection: it is closed exactly
    once, on a graceful close or on any fatal error. A session is never
    reused for another connection.

    Usage:
        conn = Connection.open(host, port)
        session = Session(conn, Path("shared"), chunk_size=1_000_000)
        session.connect(api_key)  # blocks until close or error
    """

    def __init__(
        self,
        connection: Connection,
        root: Path,
        chunk_size: int,
        on_transfer: TransferCallback | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            connection: Connected stream; owned by the session from now on.
            root: Local folder to sync.
            chunk_size: Bytes per FILE_PART frame when sending.
            on_transfer: Optional callback after each file sent or received.
        """
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        self._connection = connection
        self._root = Path(root)
        self._chunk_size = chunk_size
        self._on_transfer = on_transfer

        self._known_paths: set[str] = set()
        self._state = SessionState.CONNECTING
        self._close_received = False

        self._sender = FileSender(connection, self._root, chunk_size)
        self._receiver = FileReceiver(connection, self._root)

    @property
    def root(self) -> Path:
        """Local sync folder."""
        return self._root

    @property
    def chunk_size(self) -> int:
        """Maximum FILE_PART payload size."""
        return self._chunk_size

    @property
    def state(self) -> SessionState:
        """Current state of the session."""
        return self._state

    @property
    def known_paths(self) -> frozenset[str]:
        """Relative paths known to exist locally."""
        return frozenset(self._known_paths)

    @property
    def closed(self) -> bool:
        """Whether the session has closed its connection."""
        return self._state is SessionState.CLOSED

    # -------------------------------------------------------------------------
    # Handshake
    # -------------------------------------------------------------------------

    def connect(self, api_key: str) -> None:
        """Authenticate, advertise the local files, and run the protocol loop.

        Returns only after the peer signalled CLOSE and then ended the
        stream; every other exit is an exception.

        Raises:
            FilesystemError: If the sync folder cannot be enumerated.
            TransportError: If the connection fails.
            ProtocolViolationError: If the peer breaks the protocol.
        """
        self._guard(self.handshake, api_key)
        self._guard(self.send_manifest)
        self.run()

    def handshake(self, api_key: str) -> None:
        """Send the raw API key. The peer sends no acknowledgment."""
        try:
            self._connection.sendall(api_key.encode("utf-8"))
        except OSError as e:
            raise TransportError(f"Failed to send API key: {e}") from e
        logger.debug("Sent API key")

    def send_manifest(self) -> list[str]:
        """Enumerate the sync folder and send it as an INIT frame.

        Returns:
            The advertised paths.
        """
        paths = enumerate_files(self._root)
        self._known_paths.update(paths)
        logger.info(f"Client is started with {len(paths)} local files")
        logger.debug(f"Local files: {paths}")
        write_frame(self._connection, Opcode.INIT, encode_manifest(paths))
        self._state = SessionState.IDLE
        return paths

    # -------------------------------------------------------------------------
    # Protocol loop
    # -------------------------------------------------------------------------

    def run(self) -> None:
        """Process frames until the peer closes or an error occurs.

        A clean end of stream right after a CLOSE frame ends the loop
        normally. Any other end of stream is a TransportError.
        """
        self._state = SessionState.IDLE
        while not self.closed:
            try:
                frame = read_frame(self._connection)
            except ConnectionClosedError:
                if self._close_received:
                    logger.info("Server closed the connection")
                    self.close()
                    return
                self.close()
                raise
            except Exception:
                self.close()
                raise
            self._guard(self.handle_frame, frame)

    def handle_frame(self, frame: Frame) -> None:
        """Dispatch one frame received while idle.

        Raises:
            ProtocolViolationError: For any opcode not allowed while idle.
        """
        logger.debug(f"Reacting to frame with opcode {int(frame.opcode)} ({len(frame.payload)} bytes)")
        if frame.opcode == Opcode.INIT:
            self._handle_request(frame)
        elif frame.opcode == Opcode.FILE_PATH:
            self._handle_incoming_file(frame)
        elif frame.opcode == Opcode.CLOSE:
            logger.info("Received CLOSE from server")
            self._close_received = True
        else:
            raise ProtocolViolationError(
                f"Invalid opcode while idle: {int(frame.opcode)}",
                opcode=int(frame.opcode),
            )

    def _handle_request(self, frame: Frame) -> None:
        """Send every file listed in an INIT request, in order."""
        try:
            requested = decode_manifest(frame.payload)
        except UnicodeDecodeError as e:
            raise ProtocolViolationError(f"INIT payload is not UTF-8: {e}", opcode=Opcode.INIT) from e
        if not requested:
            return

        logger.info(f"Files were requested: {requested}")
        self._state = SessionState.SENDING
        try:
            for path in requested:
                result = self._sender.send_file(path)
                if result.complete:
                    self._known_paths.add(path)
                self._notify(result)
        finally:
            self._state = SessionState.IDLE

    def _handle_incoming_file(self, frame: Frame) -> None:
        """Receive the file announced by a FILE_PATH frame."""
        try:
            path = frame.text
        except UnicodeDecodeError as e:
            raise ProtocolViolationError(
                f"FILE_PATH payload is not UTF-8: {e}", opcode=Opcode.FILE_PATH
            ) from e

        self._state = SessionState.RECEIVING
        try:
            result = self._receiver.receive_file(path)
        finally:
            self._state = SessionState.IDLE
        self._known_paths.add(path)
        self._notify(result)

    def _notify(self, result: TransferResult) -> None:
        if self._on_transfer:
            self._on_transfer(result)

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    def close(self, notify_peer: bool = False) -> None:
        """Close the connection. Safe to call more than once.

        Args:
            notify_peer: Send a CLOSE frame first (best effort).
        """
        if self.closed:
            return
        if notify_peer:
            try:
                write_frame(self._connection, Opcode.CLOSE)
            except TransportError as e:
                logger.debug(f"Could not send CLOSE: {e}")
        self._state = SessionState.CLOSED
        self._connection.close()

    def _guard(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run ``func``, closing the connection if it raises."""
        try:
            return func(*args)
        except Exception as e:
            logger.debug(f"Closing connection after error: {e}")
            self.close()
            raise

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
