"""Tests for directory partitioning, ignore prefixes and listing helpers."""

import pytest

from adbsink.exceptions import SyncStructureError
from adbsink.sync.ignore import IgnoreFilter
from adbsink.sync.partition import partition_by_directory
from adbsink.sync.scanner import SyncFile, find_empty_dirs, with_ancestors


def _file(path: str, size: int = 10, mtime: int = 100) -> SyncFile:
    return SyncFile.from_path(path, size, mtime)


class TestSyncFile:
    """Tests for SyncFile."""

    def test_from_path_derives_name(self):
        f = SyncFile.from_path("/sdcard/DCIM/a.jpg", 5, 1700000000.75)
        assert f.name == "a.jpg"
        assert f.size == 5
        assert f.mtime == 1700000000

    def test_identity_ignores_size_and_mtime(self):
        """Two states of the same file compare equal."""
        a = SyncFile.from_path("/r/a.txt", 1, 100)
        b = SyncFile.from_path("/r/a.txt", 2, 200)
        assert a == b
        assert hash(a) == hash(b)

    def test_relative_dir(self):
        assert _file("/r/x/y/a.txt").relative_dir("/r") == "x/y"
        assert _file("/r/a.txt").relative_dir("/r") == ""


class TestPartitionByDirectory:
    """Tests for partition_by_directory."""

    def test_groups_by_parent(self):
        files = [
            _file("/r/a.txt"),
            _file("/r/x/b.txt"),
            _file("/r/x/c.txt"),
            _file("/r/x/y/d.txt"),
        ]

        result = partition_by_directory(files, "/r")

        assert set(result) == {"", "x", "x/y"}
        assert set(result[""]) == {"a.txt"}
        assert set(result["x"]) == {"b.txt", "c.txt"}
        assert result["x/y"]["d.txt"].path == "/r/x/y/d.txt"

    def test_intermediate_dirs_are_not_inferred(self):
        """A directory without direct files gets no bucket."""
        result = partition_by_directory([_file("/r/x/y/d.txt")], "/r")
        assert set(result) == {"x/y"}

    def test_empty_listing(self):
        assert partition_by_directory([], "/r") == {}

    def test_entry_outside_root_fails(self):
        with pytest.raises(SyncStructureError):
            partition_by_directory([_file("/r/a.txt"), _file("/other/b.txt")], "/r")


class TestIgnoreFilter:
    """Tests for IgnoreFilter."""

    def test_prefix_match(self):
        ignore = IgnoreFilter(["Android/data"])
        assert ignore.is_ignored("Android/data")
        assert ignore.is_ignored("Android/data/com.example/files")
        assert not ignore.is_ignored("Android/media")

    def test_plain_string_prefix(self):
        """Matching is not aware of path segments."""
        ignore = IgnoreFilter([".thumb"])
        assert ignore.is_ignored(".thumbnails")

    def test_no_prefixes(self):
        ignore = IgnoreFilter()
        assert not ignore
        assert not ignore.is_ignored("anything")

    def test_empty_prefix_is_dropped(self):
        """An empty prefix would match every directory."""
        ignore = IgnoreFilter([""])
        assert not ignore.is_ignored("a")

    def test_filter_dirs(self):
        ignore = IgnoreFilter(["cache", "tmp/"])
        assert ignore.filter_dirs({"cache", "cache/x", "tmp/a", "tmp", "docs"}) == {
            "tmp",
            "docs",
        }


class TestFindEmptyDirs:
    """Tests for find_empty_dirs."""

    def test_dirs_without_files(self):
        dirs = ["/r/a", "/r/a/b", "/r/e", "/r/e/f", "/r/g"]
        files = [_file("/r/a/b/x.txt"), _file("/r/g/y.txt")]

        assert find_empty_dirs("/r", dirs, files) == ["/r/e", "/r/e/f"]

    def test_root_is_never_reported(self):
        assert find_empty_dirs("/r", ["/r"], []) == []

    def test_ancestor_of_file_is_not_empty(self):
        dirs = ["/r/a", "/r/a/b", "/r/a/b/c"]
        files = [_file("/r/a/b/c/x.txt")]
        assert find_empty_dirs("/r", dirs, files) == []


class TestWithAncestors:
    """Tests for with_ancestors."""

    def test_adds_parents(self):
        assert with_ancestors(["a/b/c", "d"]) == {"a", "a/b", "a/b/c", "d"}

    def test_root_excluded(self):
        assert with_ancestors([""]) == set()
