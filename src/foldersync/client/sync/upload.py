"""Sending requested files to the peer.

This module provides:
- FileSender: Streams local files as FILE_PATH / FILE_PART / FILE_END frames
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from foldersync.client.sync.types import TransferResult, TransferType
from foldersync.core.frame import write_frame
from foldersync.core.manifest import validate_relative_path
from foldersync.core.types import Opcode

if TYPE_CHECKING:
    from foldersync.core.frame import ByteStream

logger = logging.getLogger(__name__)


class FileSender:
    """Sends local files in fixed-size chunks.

    One FILE_PART frame is written per non-empty read, so every part is at
    most ``chunk_size`` bytes and an empty file produces no parts at all.
    """

    def __init__(self, stream: ByteStream, root: Path, chunk_size: int) -> None:
        """Initialize the sender.

        Args:
            stream: Connection to write frames to.
            root: Local sync folder.
            chunk_size: Maximum FILE_PART payload size in bytes.
        """
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        self._stream = stream
        self._root = Path(root)
        self._chunk_size = chunk_size

    def send_file(self, path: str) -> TransferResult:
        """Send one file requested by the peer.

        If the file cannot be opened the transfer is abandoned right after
        its FILE_PATH frame and no FILE_END follows. A read error after a
        successful open ends the file early but still sends FILE_END.

        Args:
            path: Relative path requested by the peer.

        Returns:
            TransferResult; ``complete`` is False if the file was skipped
            or cut short.

        Raises:
            ProtocolViolationError: If the path escapes the sync folder.
            TransportError: If writing to the connection fails.
        """
        validate_relative_path(path)
        logger.info(f"Starting to send file {path}")

        path_bytes = path.encode("utf-8")
        write_frame(self._stream, Opcode.FILE_PATH, path_bytes)

        result = TransferResult(path=path, transfer_type=TransferType.UPLOAD)
        try:
            f = open(self._root / path, "rb")
        except OSError as e:
            logger.warning(f"Error opening file {path}: {e}")
            result.complete = False
            return result

        with f:
            while True:
                try:
                    chunk = f.read(self._chunk_size)
                except OSError as e:
                    logger.error(f"Error reading file {path}: {e}")
                    result.complete = False
                    break
                if not chunk:
                    break
                write_frame(self._stream, Opcode.FILE_PART, chunk)
                result.size += len(chunk)
                result.parts += 1
                logger.debug(f"Sent part {result.parts} of {path} ({len(chunk)} bytes)")

        write_frame(self._stream, Opcode.FILE_END, path_bytes)
        logger.info(f"Sent {path}: {result.size} bytes in {result.parts} parts")
        return result
