"""Length-prefixed frame codec for the sync wire protocol.

Frame layout:
    [1 byte  - opcode]
    [4 bytes - payload length (unsigned, little-endian)]
    [N bytes - payload]

File content is arbitrary binary data, so frames are delimited by their
length prefix only. Works over anything with socket-style ``recv`` and
``sendall`` methods.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Protocol

from foldersync.core.exceptions import ConnectionClosedError, TransportError
from foldersync.core.types import Opcode

HEADER_FORMAT = "<BI"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 5 bytes
MAX_PAYLOAD_SIZE = 0xFFFFFFFF

# Upper bound for a single recv() call while reading a payload
RECV_BUFFER_SIZE = 1024 * 1024


class ByteStream(Protocol):
    """Minimal blocking byte stream the codec reads from and writes to."""

    def recv(self, bufsize: int) -> bytes: ...

    def sendall(self, data: bytes) -> None: ...


@dataclass(frozen=True)
class Frame:
    """One opcode-tagged message unit.

    ``opcode`` is an Opcode member, or the raw int for reserved values.
    """

    opcode: Opcode | int
    payload: bytes = b""

    @property
    def text(self) -> str:
        """Payload decoded as UTF-8."""
        return self.payload.decode("utf-8")

    def to_bytes(self) -> bytes:
        """Serialize this frame for the wire."""
        return encode_frame(self.opcode, self.payload)


def encode_frame(opcode: int, payload: bytes) -> bytes:
    """Encode an opcode and payload into wire bytes.

    Raises:
        ValueError: If the opcode does not fit in a byte or the payload
            length does not fit in 32 bits.
    """
    if not 0 <= opcode <= 0xFF:
        raise ValueError(f"Opcode out of range: {opcode}")
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(f"Payload too large: {len(payload)} bytes")
    return struct.pack(HEADER_FORMAT, opcode, len(payload)) + payload


def decode_header(header: bytes) -> tuple[Opcode | int, int]:
    """Decode a 5-byte frame header into (opcode, payload_length)."""
    if len(header) != HEADER_SIZE:
        raise ValueError(f"Header must be {HEADER_SIZE} bytes, got {len(header)}")
    opcode, length = struct.unpack(HEADER_FORMAT, header)
    return Opcode.lookup(opcode), length


def write_frame(stream: ByteStream, opcode: int, payload: bytes = b"") -> None:
    """Write one frame to the stream.

    The whole frame goes out in a single ``sendall`` call, which retries
    short writes until everything is flushed.

    Raises:
        TransportError: If the stream fails before the frame is written.
    """
    data = encode_frame(opcode, payload)
    try:
        stream.sendall(data)
    except OSError as e:
        raise TransportError(f"Failed to write frame: {e}") from e


def read_exact(stream: ByteStream, size: int) -> bytes:
    """Read exactly ``size`` bytes, looping over partial reads.

    Raises:
        ConnectionClosedError: If the stream ends before the first byte.
        TransportError: If the stream ends or fails part way through.
    """
    buf = bytearray()
    while len(buf) < size:
        try:
            chunk = stream.recv(min(size - len(buf), RECV_BUFFER_SIZE))
        except OSError as e:
            raise TransportError(f"Failed to read from connection: {e}") from e
        if not chunk:
            if not buf:
                raise ConnectionClosedError("Connection closed by peer")
            raise TransportError(
                f"Connection closed after {len(buf)} of {size} bytes"
            )
        buf.extend(chunk)
    return bytes(buf)


def read_frame(stream: ByteStream) -> Frame:
    """Read one complete frame from the stream.

    Raises:
        ConnectionClosedError: If the stream ends cleanly before a new frame.
        TransportError: If the stream ends or fails inside a frame.
    """
    opcode, length = decode_header(read_exact(stream, HEADER_SIZE))
    if length == 0:
        return Frame(opcode)
    try:
        payload = read_exact(stream, length)
    except ConnectionClosedError as e:
        # Header already consumed, so this is a truncated frame
        raise TransportError(f"Connection closed before {length}-byte payload") from e
    return Frame(opcode, payload)
