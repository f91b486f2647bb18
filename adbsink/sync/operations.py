"""File transfer across the adb bridge."""

import logging

from ..adb import AdbClient
from .filesystem import FileSystem
from .modes import SyncDirection
from .scanner import SyncFile

logger = logging.getLogger(__name__)


class SyncOperations:
    """Moves file contents from the source tree to the destination tree."""

    def __init__(self, adb: AdbClient, direction: SyncDirection, dest_fs: FileSystem):
        """Initialize sync operations.

        Args:
            adb: adb client performing the transfers
            direction: Whether files are pulled from or pushed to the device
            dest_fs: Destination tree, used to fix up modification times
        """
        self.adb = adb
        self.direction = direction
        self.dest_fs = dest_fs

    def transfer(
        self, source_file: SyncFile, dest_path: str, preserve_mtime: bool = False
    ) -> str:
        """Copy one file to ``dest_path``, overwriting it if present.

        When ``preserve_mtime`` is set, pulls ask adb to keep the
        timestamp while pushes set it on the device once the transfer
        has finished.

        Args:
            source_file: File to copy
            dest_path: Full destination path
            preserve_mtime: Give the copy the source's modification time

        Returns:
            adb's transfer report, stripped of trailing whitespace
        """
        if self.direction == SyncDirection.PULL:
            report = self.adb.pull(
                source_file.path, dest_path, preserve_timestamp=preserve_mtime
            )
        else:
            report = self.adb.push(source_file.path, dest_path)

        if preserve_mtime and not self.direction.transfer_preserves_mtime:
            logger.debug("Setting mtime of %s to %d", dest_path, source_file.mtime)
            self.dest_fs.set_mtime(dest_path, source_file.mtime)

        return report.rstrip()
