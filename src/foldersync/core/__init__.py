"""Core module - Wire protocol, manifest, and configuration."""

from foldersync.core.config import ClientConfig, ConfigError
from foldersync.core.exceptions import (
    ConnectionClosedError,
    FilesystemError,
    ProtocolViolationError,
    SyncError,
    TransportError,
)
from foldersync.core.frame import (
    HEADER_SIZE,
    MAX_PAYLOAD_SIZE,
    Frame,
    decode_header,
    encode_frame,
    read_frame,
    write_frame,
)
from foldersync.core.manifest import (
    decode_manifest,
    encode_manifest,
    validate_relative_path,
)
from foldersync.core.types import Opcode, SessionState

__all__ = [
    # Config
    "ClientConfig",
    "ConfigError",
    # Exceptions
    "ConnectionClosedError",
    "FilesystemError",
    "ProtocolViolationError",
    "SyncError",
    "TransportError",
    # Frame codec
    "HEADER_SIZE",
    "MAX_PAYLOAD_SIZE",
    "Frame",
    "decode_header",
    "encode_frame",
    "read_frame",
    "write_frame",
    # Manifest
    "decode_manifest",
    "encode_manifest",
    "validate_relative_path",
    # Types
    "Opcode",
    "SessionState",
]
