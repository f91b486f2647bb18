"""Tests for SyncOperations and the timestamp policy."""

from unittest.mock import Mock

from adbsink.adb import AdbClient
from adbsink.sync.filesystem import LocalFileSystem
from adbsink.sync.modes import SyncDirection
from adbsink.sync.operations import SyncOperations
from adbsink.sync.scanner import SyncFile


def _file() -> SyncFile:
    return SyncFile.from_path("/src/a.txt", 3, 1700000000)


class TestSyncOperations:
    """Tests for SyncOperations.transfer."""

    def setup_method(self):
        self.adb = Mock(spec=AdbClient)
        self.adb.pull.return_value = "/src/a.txt: 1 file pulled.\n"
        self.adb.push.return_value = "/src/a.txt: 1 file pushed.\n"
        self.dest_fs = Mock(spec=LocalFileSystem)

    def test_pull_asks_adb_to_keep_timestamp(self):
        ops = SyncOperations(self.adb, SyncDirection.PULL, self.dest_fs)

        report = ops.transfer(_file(), "/dst/a.txt", preserve_mtime=True)

        self.adb.pull.assert_called_once_with(
            "/src/a.txt", "/dst/a.txt", preserve_timestamp=True
        )
        self.dest_fs.set_mtime.assert_not_called()
        assert report == "/src/a.txt: 1 file pulled."

    def test_push_sets_timestamp_afterwards(self):
        ops = SyncOperations(self.adb, SyncDirection.PUSH, self.dest_fs)

        ops.transfer(_file(), "/dst/a.txt", preserve_mtime=True)

        self.adb.push.assert_called_once_with("/src/a.txt", "/dst/a.txt")
        self.dest_fs.set_mtime.assert_called_once_with("/dst/a.txt", 1700000000)

    def test_no_timestamp_requested(self):
        pull = SyncOperations(self.adb, SyncDirection.PULL, self.dest_fs)
        push = SyncOperations(self.adb, SyncDirection.PUSH, self.dest_fs)

        pull.transfer(_file(), "/dst/a.txt")
        push.transfer(_file(), "/dst/a.txt")

        self.adb.pull.assert_called_once_with(
            "/src/a.txt", "/dst/a.txt", preserve_timestamp=False
        )
        self.dest_fs.set_mtime.assert_not_called()


class TestSyncDirection:
    """Tests for SyncDirection."""

    def test_transfer_preserves_mtime(self):
        assert SyncDirection.PULL.transfer_preserves_mtime
        assert not SyncDirection.PUSH.transfer_preserves_mtime

    def test_from_string(self):
        assert SyncDirection("push") == SyncDirection.PUSH
        assert SyncDirection.PULL.source_is_device
