"""Receiving files pushed by the peer.

This module provides:
- IncomingTransfer: State of the file currently being received
- FileReceiver: Writes FILE_PART payloads to disk until the matching FILE_END
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from foldersync.client.sync.scanner import ensure_dir
from foldersync.client.sync.types import TransferResult, TransferType
from foldersync.core.exceptions import FilesystemError, ProtocolViolationError
from foldersync.core.frame import read_frame
from foldersync.core.manifest import validate_relative_path
from foldersync.core.types import Opcode

if TYPE_CHECKING:
    from foldersync.core.frame import ByteStream

logger = logging.getLogger(__name__)


@dataclass
class IncomingTransfer:
    """A file being received.

    Attributes:
        path: Relative path announced by FILE_PATH.
        handle: Destination file, open for writing.
        bytes_written: Bytes appended so far.
        parts: FILE_PART frames received so far.
    """

    path: str
    handle: BinaryIO
    bytes_written: int = 0
    parts: int = 0

    def write(self, data: bytes) -> None:
        """Append one part to the destination file."""
        try:
            self.handle.write(data)
        except OSError as e:
            raise FilesystemError(f"Error during writing file {self.path}: {e}") from e
        self.bytes_written += len(data)
        self.parts += 1


class FileReceiver:
    """Receives one file at a time from the connection.

    No rollback happens on failure: a partially received file stays on
    disk as written.
    """

    def __init__(self, stream: ByteStream, root: Path) -> None:
        """Initialize the receiver.

        Args:
            stream: Connection to read frames from.
            root: Local sync folder.
        """
        self._stream = stream
        self._root = Path(root)

    def receive_file(self, path: str) -> TransferResult:
        """Receive the file announced by a FILE_PATH frame.

        Reads FILE_PART frames until FILE_END. Directories leading to the
        destination are created before the file is opened.

        Args:
            path: Relative path from the FILE_PATH payload.

        Returns:
            TransferResult for the completed download.

        Raises:
            ProtocolViolationError: On an unsafe path, an opcode other than
                FILE_PART/FILE_END, or a FILE_END for a different path.
            FilesystemError: If the destination cannot be created or written.
            TransportError: If the connection fails mid-transfer.
        """
        validate_relative_path(path)
        logger.info(f"Starting to receive new file: {path}")

        destination = self._root / path
        ensure_dir(destination.parent)
        try:
            handle = open(destination, "wb")
        except OSError as e:
            raise FilesystemError(f"Error creating file {destination}: {e}") from e

        with handle:
            transfer = IncomingTransfer(path=path, handle=handle)
            self._receive_parts(transfer)

        logger.info(
            f"Fully received new file: {path} "
            f"({transfer.bytes_written} bytes in {transfer.parts} parts)"
        )
        return TransferResult(
            path=path,
            transfer_type=TransferType.DOWNLOAD,
            size=transfer.bytes_written,
            parts=transfer.parts,
        )

    def _receive_parts(self, transfer: IncomingTransfer) -> None:
        """Append FILE_PART payloads until the matching FILE_END arrives."""
        while True:
            frame = read_frame(self._stream)
            if frame.opcode == Opcode.FILE_PART:
                transfer.write(frame.payload)
                continue
            if frame.opcode == Opcode.FILE_END:
                if frame.payload != transfer.path.encode("utf-8"):
                    raise ProtocolViolationError(
                        f"Received end signal for wrong file path: {frame.payload!r} "
                        f"(expected {transfer.path!r})",
                        opcode=Opcode.FILE_END,
                    )
                return
            raise ProtocolViolationError(
                f"Invalid opcode in the middle of receiving {transfer.path}: {int(frame.opcode)}",
                opcode=int(frame.opcode),
            )
