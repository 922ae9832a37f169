"""Sync commands for the FolderSync CLI.

Commands:
- sync: Connect to the server and keep the folder in sync
- manifest: Print the local files that would be advertised to the server
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from foldersync.client.cli.config import (
    connection_options,
    debug_option,
    folder_option,
    log_level,
    setup_logging,
)
from foldersync.core.config import DEBUG_FOLDER, ClientConfig, ConfigError


@click.command()
@connection_options
@folder_option
@debug_option
@click.option("--verbose", "-v", is_flag=True, help="Log every frame.")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors.")
def sync(
    host: str | None,
    port: int | None,
    api_key: str | None,
    chunk_size: int | None,
    folder: str | None,
    debug: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Synchronize the folder with the server.

    Sends the local file list, then serves file requests from the server
    and stores files the server pushes. Runs until the server closes the
    connection or an error occurs.
    """
    from foldersync.client.connection import Connection
    from foldersync.client.sync import Session, SyncError, TransferResult

    setup_logging(log_level(verbose, quiet))

    try:
        config = ClientConfig.resolve(
            host=host,
            port=port,
            folder=folder,
            api_key=api_key,
            chunk_size=chunk_size,
            debug=debug,
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    def on_transfer(result: TransferResult) -> None:
        if result.complete and not quiet:
            click.echo(f"  {result.transfer_type.arrow} {result.path}")

    session: Session | None = None
    try:
        connection = Connection.open(*config.address)
        session = Session(connection, config.folder, config.chunk_size, on_transfer=on_transfer)
        session.connect(config.api_key)
    except SyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        if session is not None:
            session.close(notify_peer=True)
        click.echo("\nStopped.")
        sys.exit(130)

    click.echo("Server closed the connection.")


@click.command()
@folder_option
@debug_option
def manifest(folder: str | None, debug: bool) -> None:
    """List the local files that would be sent to the server.

    Paths are relative to the sync folder, one per line.
    """
    from foldersync.client.sync import SyncError, enumerate_files

    if not folder:
        if not debug:
            click.echo("Error: No folder given. Use --folder or set CLIENT_FOLDER.", err=True)
            sys.exit(1)
        folder = DEBUG_FOLDER

    try:
        paths = enumerate_files(Path(folder).expanduser())
    except SyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for path in paths:
        click.echo(path)
