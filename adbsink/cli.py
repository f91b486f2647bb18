"""CLI interface for adbsink."""

import logging
from pathlib import Path
from typing import Any, Callable

import click

from . import __version__
from .adb import AdbClient
from .config import Config
from .exceptions import AdbSinkError, ConfigError
from .output import OutputFormatter
from .sync import (
    AndroidFileSystem,
    LocalFileSystem,
    SyncDirection,
    SyncEngine,
    SyncOperations,
    SyncOptions,
    destination_root,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--adb-path",
    envvar="ADBSINK_ADB",
    default=None,
    help="adb executable to use (default: adb on PATH)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__, prog_name="adbsink")
@click.pass_context
def main(ctx: Any, adb_path: str, quiet: bool, verbose: bool) -> None:
    """adbsink - Sync directories between this machine and an Android device."""
    ctx.ensure_object(dict)
    out = OutputFormatter(quiet=quiet)
    ctx.obj["out"] = out
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("adbsink").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        ctx.obj["config"] = Config.from_env(adb_path=adb_path)
    except ConfigError as e:
        out.error(str(e))
        ctx.exit(1)


_SYNC_ARGUMENTS = [
    click.argument("source"),
    click.argument("dest"),
    click.option(
        "--set-times", "-t", is_flag=True, help="Set modified time of copied files"
    ),
    click.option(
        "--delete-if-dne",
        "-d",
        is_flag=True,
        help="Delete files on target that do not exist in source",
    ),
    click.option(
        "--ignore-dir",
        "-i",
        multiple=True,
        help="Ignore dirs starting with the given string (repeatable)",
    ),
    click.option(
        "--dry-run", is_flag=True, help="Show what would be done without doing it"
    ),
]


def sync_arguments(func: Callable) -> Callable:
    """Attach the arguments shared by ``pull`` and ``push``."""
    for decorator in reversed(_SYNC_ARGUMENTS):
        func = decorator(func)
    return func


@main.command()
@sync_arguments
@click.pass_context
def pull(
    ctx: Any,
    source: str,
    dest: str,
    set_times: bool,
    delete_if_dne: bool,
    ignore_dir: tuple[str, ...],
    dry_run: bool,
) -> None:
    """Sync SOURCE on the device into DEST on this machine.

    The source directory is recreated beneath DEST, so pulling
    /sdcard/DCIM into backup writes to backup/DCIM.
    """
    options = SyncOptions.create(
        propagate_mtime=set_times,
        delete_orphans=delete_if_dne,
        ignored_prefixes=ignore_dir,
        dry_run=dry_run,
    )
    _run_sync(ctx, SyncDirection.PULL, source, dest, options)


@main.command()
@sync_arguments
@click.pass_context
def push(
    ctx: Any,
    source: str,
    dest: str,
    set_times: bool,
    delete_if_dne: bool,
    ignore_dir: tuple[str, ...],
    dry_run: bool,
) -> None:
    """Sync SOURCE on this machine into DEST on the device.

    The source directory is recreated beneath DEST, so pushing
    Music into /sdcard writes to /sdcard/Music.
    """
    options = SyncOptions.create(
        propagate_mtime=set_times,
        delete_orphans=delete_if_dne,
        ignored_prefixes=ignore_dir,
        dry_run=dry_run,
    )
    _run_sync(ctx, SyncDirection.PUSH, source, dest, options)


def _run_sync(
    ctx: Any,
    direction: SyncDirection,
    source: str,
    dest: str,
    options: SyncOptions,
) -> None:
    """Check the device, wire up both trees and run the engine."""
    out: OutputFormatter = ctx.obj["out"]
    config: Config = ctx.obj["config"]

    try:
        adb = AdbClient(config)
        devices = adb.check_single_device()
        out.print(devices.strip())
        out.print("")

        android_fs = AndroidFileSystem(adb)
        local_fs = LocalFileSystem()
        if direction.source_is_device:
            source_fs, dest_fs = android_fs, local_fs
        else:
            # Resolve so "." and ".." still yield a directory name
            source = Path(source).resolve().as_posix()
            source_fs, dest_fs = local_fs, android_fs

        dest_root = destination_root(source, dest)
        out.info(f"{source} -> {dest_root}")
        if options.dry_run:
            out.info("Dry run: No changes will be made")
        out.print("")

        engine = SyncEngine(
            source_fs,
            dest_fs,
            SyncOperations(adb, direction, dest_fs),
            output=out,
        )
        engine.synchronize(source, dest_root, options)
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
    except AdbSinkError as e:
        logger.debug("Sync failed", exc_info=True)
        out.error(str(e))
        ctx.exit(1)


if __name__ == "__main__":
    main()
