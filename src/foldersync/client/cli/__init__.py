"""Command-line interface for FolderSync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- sync: Synchronize the local folder with the server
- manifest: Print the local file list
"""

from __future__ import annotations

import click

from foldersync.client.cli.config import log_level, setup_logging
from foldersync.client.cli.sync import manifest, sync


@click.group()
@click.version_option(package_name="foldersync")
def cli() -> None:
    """FolderSync - Share one folder with all clients of a sync server."""


# Sync commands
cli.add_command(sync)
cli.add_command(manifest)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "log_level",
    "main",
    "setup_logging",
]
