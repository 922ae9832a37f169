"""Configuration for the foldersync client.

This module defines the settings a sync session needs and how missing
values are filled in debug mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Environment variables read by the CLI
ENV_SERVER_HOST = "SERVER_HOST"
ENV_SERVER_PORT = "SERVER_PORT"
ENV_CLIENT_FOLDER = "CLIENT_FOLDER"
ENV_API_KEY = "API_KEY"
ENV_CHUNK_SIZE = "CHUNK_SIZE"

# Values used for missing settings when --debug is given
DEBUG_HOST = "localhost"
DEBUG_PORT = 8080
DEBUG_FOLDER = "mounted-client-folder"
DEBUG_API_KEY = "SUPER-SECRET-API-KEY"
DEBUG_CHUNK_SIZE = 10_000_000


class ConfigError(ValueError):
    """Raised when required settings are missing or invalid."""


@dataclass
class ClientConfig:
    """Settings for connecting to a sync server.

    Attributes:
        host: Server hostname or IP address.
        port: Server TCP port.
        folder: Local folder to sync. Must exist.
        api_key: Shared secret sent unframed at connection start.
        chunk_size: Bytes per FILE_PART frame when sending files.
    """

    host: str
    port: int
    folder: Path
    api_key: str
    chunk_size: int

    def __post_init__(self) -> None:
        """Validate settings."""
        self.folder = Path(self.folder)
        if not self.host:
            raise ConfigError("Server host cannot be empty")
        if not 0 < self.port < 65536:
            raise ConfigError(f"Invalid server port: {self.port}")
        if not self.api_key:
            raise ConfigError("API key cannot be empty")
        if self.chunk_size <= 0:
            raise ConfigError(f"Chunk size must be positive, got {self.chunk_size}")
        if not self.folder.is_dir():
            raise ConfigError(f"Sync folder does not exist or is not a directory: {self.folder}")

    @property
    def address(self) -> tuple[str, int]:
        """(host, port) pair passed to Connection.open."""
        return (self.host, self.port)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(host={self.host!r}, port={self.port}, "
            f"folder={str(self.folder)!r}, api_key='censored', "
            f"chunk_size={self.chunk_size})"
        )

    @classmethod
    def resolve(
        cls,
        host: str | None = None,
        port: int | None = None,
        folder: str | Path | None = None,
        api_key: str | None = None,
        chunk_size: int | None = None,
        debug: bool = False,
    ) -> ClientConfig:
        """Build a config from possibly missing values.

        In debug mode every missing value gets its debug default. Otherwise
        all values are required.

        Raises:
            ConfigError: If a value is missing (outside debug mode) or invalid.
        """
        if debug:
            host = host or DEBUG_HOST
            port = port or DEBUG_PORT
            folder = folder or DEBUG_FOLDER
            api_key = api_key or DEBUG_API_KEY
            chunk_size = chunk_size or DEBUG_CHUNK_SIZE

        if not host or not port or not folder or not api_key or not chunk_size:
            raise ConfigError(
                "At least one required setting was missing: "
                f"serverHost: {host}, serverPort: {port}, pathToFolder: {folder}, "
                f"apiKey: {'censored' if api_key else None}, chunkSize: {chunk_size}"
            )

        return cls(
            host=host,
            port=port,
            folder=Path(folder).expanduser(),
            api_key=api_key,
            chunk_size=chunk_size,
        )
