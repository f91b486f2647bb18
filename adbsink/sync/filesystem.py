"""Tree adapters: the local disk and a device reached through adb."""

import logging
import os
import shlex
import shutil
import stat
from pathlib import Path
from typing import Protocol

from ..adb import AdbClient
from ..exceptions import AdbError, FileSystemError
from ..utils import join_path, normalize_path
from .scanner import SyncFile, TreeListing, find_empty_dirs

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Operations the sync engine needs from either side of a sync."""

    def get_all_files(self, root: str) -> TreeListing:
        """List every file and empty directory beneath ``root``."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def mkdir(self, path: str) -> None:
        """Create a directory and its parents; succeed if it exists."""
        ...

    def rm_file(self, path: str) -> None:
        ...

    def rm_dir(self, path: str) -> None:
        """Remove a directory and everything beneath it."""
        ...

    def set_mtime(self, path: str, timestamp: int) -> None:
        ...


class LocalFileSystem:
    """Tree adapter for the local disk."""

    def get_all_files(self, root: str) -> TreeListing:
        """Walk ``root`` recursively.

        Symlinks and special files are skipped. Paths in the result are
        built on the normalized ``root`` string so they can be stripped
        back to relative paths.

        Args:
            root: Directory to list

        Returns:
            TreeListing of files and empty directories
        """
        root = normalize_path(root)
        base = Path(root)
        if not base.is_dir():
            logger.debug("Local root %s does not exist", root)
            return TreeListing([], [])

        files: list[SyncFile] = []
        dirs: list[str] = []
        for dirpath, dirnames, filenames in os.walk(base):
            rel_dir = Path(dirpath).relative_to(base).as_posix()
            if rel_dir == ".":
                rel_dir = ""
            # Symlinked directories are not synced
            dirnames[:] = [
                d for d in dirnames if not os.path.islink(os.path.join(dirpath, d))
            ]
            for name in dirnames:
                dirs.append(join_path(root, rel_dir, name))
            for name in filenames:
                full = os.path.join(dirpath, name)
                try:
                    st = os.lstat(full)
                except OSError as e:
                    logger.warning("Cannot stat %s: %s", full, e)
                    continue
                if not stat.S_ISREG(st.st_mode):
                    continue
                files.append(
                    SyncFile.from_path(
                        join_path(root, rel_dir, name), st.st_size, st.st_mtime
                    )
                )

        logger.debug(
            "Listed %d file(s), %d dir(s) under %s", len(files), len(dirs), root
        )
        return TreeListing(files, find_empty_dirs(root, dirs, files))

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def mkdir(self, path: str) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(f"could not create directory '{path}': {e}") from e

    def rm_file(self, path: str) -> None:
        try:
            Path(path).unlink()
        except OSError as e:
            raise FileSystemError(f"could not remove '{path}': {e}") from e

    def rm_dir(self, path: str) -> None:
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise FileSystemError(f"could not remove directory '{path}': {e}") from e

    def set_mtime(self, path: str, timestamp: int) -> None:
        try:
            atime = os.stat(path).st_atime
            os.utime(path, (atime, timestamp))
        except OSError as e:
            raise FileSystemError(f"could not set mtime of '{path}': {e}") from e


class AndroidFileSystem:
    """Tree adapter for a device, driven by shell commands over adb."""

    # size, mtime (epoch seconds), path
    STAT_FORMAT = "%s %Y %n"

    def __init__(self, adb: AdbClient):
        """Initialize the adapter.

        Args:
            adb: Client used to run shell commands on the device
        """
        self.adb = adb

    def get_all_files(self, root: str) -> TreeListing:
        """List ``root`` on the device with ``find`` and ``stat``.

        A symlinked root such as ``/sdcard`` is followed, symlinks beneath
        it are not. Unreadable subtrees are skipped silently.

        Args:
            root: Directory on the device

        Returns:
            TreeListing of files and empty directories
        """
        root = normalize_path(root)
        if not self.exists(root):
            logger.debug("Device root %s does not exist", root)
            return TreeListing([], [])

        quoted = shlex.quote(root)
        stat_output = self.adb.shell(
            f"find -H {quoted} -type f -exec stat -c "
            f"{shlex.quote(self.STAT_FORMAT)} {{}} + 2>/dev/null; true"
        )
        files = [
            self._parse_stat_line(line) for line in stat_output.splitlines() if line
        ]

        dir_output = self.adb.shell(f"find -H {quoted} -type d 2>/dev/null; true")
        dirs = [line for line in dir_output.splitlines() if line]

        logger.debug(
            "Listed %d file(s), %d dir(s) under %s", len(files), len(dirs), root
        )
        return TreeListing(files, find_empty_dirs(root, dirs, files))

    def _parse_stat_line(self, line: str) -> SyncFile:
        parts = line.split(" ", 2)
        if len(parts) != 3 or not parts[0].isdigit() or not parts[1].isdigit():
            raise AdbError(f"unexpected stat output: '{line}'", output=line)
        size, mtime, path = parts
        return SyncFile.from_path(path, int(size), int(mtime))

    def exists(self, path: str) -> bool:
        output = self.adb.shell(f"[ -e {shlex.quote(path)} ] && echo 1 || echo 0")
        return output.strip() == "1"

    def mkdir(self, path: str) -> None:
        self.adb.shell(f"mkdir -p {shlex.quote(path)}")

    def rm_file(self, path: str) -> None:
        self.adb.shell(f"rm -f {shlex.quote(path)}")

    def rm_dir(self, path: str) -> None:
        self.adb.shell(f"rm -rf {shlex.quote(path)}")

    def set_mtime(self, path: str, timestamp: int) -> None:
        self.adb.shell(f"touch -c -m -d @{int(timestamp)} {shlex.quote(path)}")
