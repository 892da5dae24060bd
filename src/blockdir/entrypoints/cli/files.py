"""``blockdir files``: work with the files of a SQL-backed directory.

The group options pick the directory (keyspace and column family) and tune
it (block size for new files, cache capacity); every option also reads a
``BLOCKDIR_*`` environment variable. The database comes from
``BLOCKDIR_DB_URL`` and must have been upgraded with ``blockdir db upgrade``.

File contents travel through binary stdin/stdout so they can be piped:

    $ blockdir files put _0.cfs < _0.cfs
    $ blockdir files cat _0.cfs | sha256sum
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import BinaryIO

import click
import click_extra as clickx

from blockdir import config
from blockdir.bootstrap import open_directory
from blockdir.directory import BlockDirectory
from blockdir.domain.errors import BlockDirError
from blockdir.interfaces.column_store import ColumnStoreError
from blockdir.logging import log_directory_settings

from .db import MISSING_DB_URL_MSG, UPGRADE_SCHEMA_INSTRUCTIONS
from .helpers import success

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
CHUNK_SIZE = 64 * 1024


@contextmanager
def directory_for(settings: config.DirectorySettings) -> Iterator[BlockDirectory]:
    """Open the configured directory, turning failures into ClickExceptions."""
    try:
        directory = open_directory(settings)
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    log_directory_settings(logger, settings)
    try:
        with directory:
            yield directory
    except BlockDirError as e:
        raise click.ClickException(str(e)) from e
    except ColumnStoreError as e:
        raise click.ClickException(
            f"{e}\nIs the schema up to date? {UPGRADE_SCHEMA_INSTRUCTIONS}"
        ) from e


def _format_time(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)[:-3]


@click.group(cls=clickx.ExtraGroup)
@click.option(
    "--keyspace",
    default=config.DEFAULT_KEYSPACE,
    envvar=config.KEYSPACE_ENV,
    show_default=True,
    show_envvar=True,
    help="Keyspace the directory lives in.",
)
@click.option(
    "--column-family",
    default=config.DEFAULT_COLUMN_FAMILY,
    envvar=config.COLUMN_FAMILY_ENV,
    show_default=True,
    show_envvar=True,
    help="Column family holding the blocks.",
)
@click.option(
    "--block-size",
    type=click.IntRange(min=1),
    default=config.DEFAULT_BLOCK_SIZE,
    envvar=config.BLOCK_SIZE_ENV,
    show_default=True,
    show_envvar=True,
    help="Block size in bytes for newly written files.",
)
@click.option(
    "--cache-size",
    type=click.IntRange(min=0),
    default=config.DEFAULT_CACHE_SIZE,
    envvar=config.CACHE_SIZE_ENV,
    show_default=True,
    show_envvar=True,
    help="Blocks kept in the read cache (0 disables it).",
)
@click.pass_context
def files(
    ctx: click.Context,
    keyspace: str,
    column_family: str,
    block_size: int,
    cache_size: int,
) -> None:
    """Inspect and transfer directory files."""
    try:
        ctx.obj = config.DirectorySettings(
            keyspace=keyspace,
            column_family=column_family,
            block_size=block_size,
            cache_size=cache_size,
        )
    except config.InvalidSettingsError as e:
        raise click.BadParameter(str(e)) from e


@files.command(name="ls")
@click.option("--long", "-l", "long_format", is_flag=True, help="Show sizes and times.")
@click.pass_obj
def list_files(settings: config.DirectorySettings, long_format: bool) -> None:
    """List files, sorted by name."""
    with directory_for(settings) as directory:
        for name in directory.list_all():
            if not long_format:
                click.echo(name)
                continue
            entry = directory.stat_file(name)
            click.echo(
                f"{entry.length:>12}  {_format_time(entry.last_modified)}  {name}"
            )


@files.command()
@click.argument("name")
@click.pass_obj
def stat(settings: config.DirectorySettings, name: str) -> None:
    """Show the catalog entry of NAME."""
    with directory_for(settings) as directory:
        entry = directory.stat_file(name)
    click.echo(f"Name       : {entry.name}")
    click.echo(f"Length     : {entry.length}")
    click.echo(f"Modified   : {entry.last_modified.isoformat()}")
    click.echo(f"Block size : {entry.block_size}")


@files.command()
@click.argument("name")
@click.pass_obj
def cat(settings: config.DirectorySettings, name: str) -> None:
    """Write the contents of NAME to stdout."""
    out = click.get_binary_stream("stdout")
    with directory_for(settings) as directory, directory.open_input(name) as stream:
        while remaining := stream.remaining:
            out.write(stream.read_bytes(min(CHUNK_SIZE, remaining)))
    out.flush()


@files.command()
@click.argument("name")
@click.argument("source", type=click.File("rb"), default="-")
@click.pass_obj
def put(settings: config.DirectorySettings, name: str, source: BinaryIO) -> None:
    """Store SOURCE (default: stdin) as NAME, replacing any existing file."""
    with directory_for(settings) as directory:
        with directory.create_output(name) as stream:
            while chunk := source.read(settings.block_size):
                stream.write_bytes(chunk)
            length = stream.length()
    success(f"Wrote {length} bytes to '{name}'")


@files.command()
@click.argument("name")
@click.pass_obj
def rm(settings: config.DirectorySettings, name: str) -> None:
    """Delete NAME and its blocks."""
    with directory_for(settings) as directory:
        directory.delete_file(name)
    success(f"Deleted '{name}'")


@files.command()
@click.argument("name")
@click.option(
    "--no-create", "-c", is_flag=True, help="Do nothing if NAME does not exist."
)
@click.pass_obj
def touch(settings: config.DirectorySettings, name: str, no_create: bool) -> None:
    """Update the modification time of NAME, creating it empty if absent."""
    with directory_for(settings) as directory:
        if directory.file_exists(name):
            directory.touch_file(name)
        elif not no_create:
            directory.create_output(name).close()
