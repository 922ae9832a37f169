"""Configuration utilities for the FolderSync CLI.

This module provides the shared click options and logging setup used
across CLI commands.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import click

from foldersync.core.config import (
    ENV_API_KEY,
    ENV_CHUNK_SIZE,
    ENV_CLIENT_FOLDER,
    ENV_SERVER_HOST,
    ENV_SERVER_PORT,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Send foldersync log records to stderr.

    Replaces any handler installed by a previous call so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        level: Minimum level to emit.
    """
    logger = logging.getLogger("foldersync")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def log_level(verbose: bool, quiet: bool) -> int:
    """Pick the log level for the --verbose/--quiet flags."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def folder_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """--folder option, falling back to $CLIENT_FOLDER."""
    return click.option(
        "--folder",
        envvar=ENV_CLIENT_FOLDER,
        default=None,
        type=click.Path(file_okay=False),
        help=f"Folder to sync. Must exist. [env: {ENV_CLIENT_FOLDER}]",
    )(func)


def debug_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """--debug flag that fills missing settings with dummy values."""
    return click.option(
        "--debug",
        is_flag=True,
        help="Enable debug mode. This sets dummy values for all missing settings.",
    )(func)


def connection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Server, credential, and chunk size options, each with an env fallback."""
    options = [
        click.option(
            "--host",
            envvar=ENV_SERVER_HOST,
            default=None,
            help=f"Server host. Debug value: localhost [env: {ENV_SERVER_HOST}]",
        ),
        click.option(
            "--port",
            envvar=ENV_SERVER_PORT,
            default=None,
            type=int,
            help=f"Server port. Debug value: 8080 [env: {ENV_SERVER_PORT}]",
        ),
        click.option(
            "--api-key",
            envvar=ENV_API_KEY,
            default=None,
            help=f"API key for authentication with the server. [env: {ENV_API_KEY}]",
        ),
        click.option(
            "--chunk-size",
            envvar=ENV_CHUNK_SIZE,
            default=None,
            type=int,
            help=(
                "Chunk size in bytes for sending file parts. "
                f"Debug value: 10000000 [env: {ENV_CHUNK_SIZE}]"
            ),
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func
