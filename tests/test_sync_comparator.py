"""Tests for the FileComparator class."""

from adbsink.sync.comparator import (
    REASON_DNE,
    REASON_IN_SYNC,
    REASON_NEWER,
    REASON_SIZE,
    FileComparator,
    SyncAction,
    normalize_name,
)
from adbsink.sync.scanner import SyncFile


def _src(name: str, size: int = 10, mtime: int = 100, rel_dir: str = "a") -> SyncFile:
    return SyncFile.from_path(f"/sdcard/root/{rel_dir}/{name}", size, mtime)


def _dst(name: str, size: int = 10, mtime: int = 100, rel_dir: str = "a") -> SyncFile:
    return SyncFile.from_path(f"backup/root/{rel_dir}/{name}", size, mtime)


class TestCompareFile:
    """Tests for compare_file."""

    def setup_method(self):
        self.comparator = FileComparator("backup/root")

    def test_missing_on_destination_copies(self):
        decision = self.comparator.compare_file("a", _src("f.txt"), None)

        assert decision.action == SyncAction.COPY
        assert decision.reason == REASON_DNE
        assert decision.dest_path == "backup/root/a/f.txt"

    def test_missing_in_root_directory(self):
        decision = self.comparator.compare_file("", _src("f.txt", rel_dir=""), None)
        assert decision.dest_path == "backup/root/f.txt"

    def test_size_mismatch_copies(self):
        decision = self.comparator.compare_file(
            "a", _src("f.txt", size=10), _dst("f.txt", size=11)
        )
        assert decision.action == SyncAction.COPY
        assert decision.reason == REASON_SIZE
        assert decision.dest_path == "backup/root/a/f.txt"

    def test_size_wins_over_newer_destination(self):
        """Different size copies even when the destination is newer."""
        decision = self.comparator.compare_file(
            "a", _src("f.txt", size=10, mtime=100), _dst("f.txt", size=12, mtime=500)
        )
        assert decision.action == SyncAction.COPY
        assert decision.reason == REASON_SIZE

    def test_newer_source_copies(self):
        """Source t=100, destination t=90, same size."""
        decision = self.comparator.compare_file(
            "a", _src("f.txt", mtime=100), _dst("f.txt", mtime=90)
        )
        assert decision.action == SyncAction.COPY
        assert decision.reason == REASON_NEWER

    def test_equal_timestamps_skip(self):
        decision = self.comparator.compare_file("a", _src("f.txt"), _dst("f.txt"))
        assert decision.action == SyncAction.SKIP
        assert decision.reason == REASON_IN_SYNC

    def test_older_source_skips(self):
        decision = self.comparator.compare_file(
            "a", _src("f.txt", mtime=50), _dst("f.txt", mtime=90)
        )
        assert decision.action == SyncAction.SKIP


class TestFindOrphans:
    """Tests for orphan detection."""

    def setup_method(self):
        self.comparator = FileComparator("backup/root")

    def test_destination_only_file_is_orphan(self):
        orphans = self.comparator.find_orphans(
            {"keep.txt": _src("keep.txt")},
            {"keep.txt": _dst("keep.txt"), "stale.txt": _dst("stale.txt")},
        )

        assert len(orphans) == 1
        assert orphans[0].action == SyncAction.DELETE
        assert orphans[0].dest_path == "backup/root/a/stale.txt"

    def test_trailing_dot_counterpart_is_not_orphan(self):
        """'notes.' on the device is stored as 'notes' on Windows."""
        orphans = self.comparator.find_orphans(
            {"notes.": _src("notes.")},
            {"notes": _dst("notes")},
        )
        assert orphans == []

    def test_trailing_dot_only_applies_one_way(self):
        """A destination name with the dot is not matched by a plain source."""
        orphans = self.comparator.find_orphans(
            {"notes": _src("notes")},
            {"notes": _dst("notes"), "notes.": _dst("notes.")},
        )
        assert [o.dest_file.name for o in orphans] == ["notes."]


class TestCompareBucket:
    """Tests for compare_bucket."""

    def setup_method(self):
        self.comparator = FileComparator("backup/root")

    def test_orphans_only_when_enabled(self):
        source = {"a.txt": _src("a.txt")}
        dest = {"a.txt": _dst("a.txt"), "b.txt": _dst("b.txt")}

        without = self.comparator.compare_bucket("a", source, dest)
        with_delete = self.comparator.compare_bucket(
            "a", source, dest, delete_orphans=True
        )

        assert [d.action for d in without] == [SyncAction.SKIP]
        assert [d.action for d in with_delete] == [SyncAction.SKIP, SyncAction.DELETE]

    def test_missing_destination_bucket(self):
        source = {"a.txt": _src("a.txt"), "b.txt": _src("b.txt")}

        decisions = self.comparator.compare_bucket("a", source, None, True)

        assert [d.action for d in decisions] == [SyncAction.COPY, SyncAction.COPY]
        assert all(d.reason == REASON_DNE for d in decisions)


class TestNormalizeName:
    """Tests for normalize_name."""

    def test_strips_one_trailing_dot(self):
        assert normalize_name("notes.") == "notes"
        assert normalize_name("notes..") == "notes."

    def test_plain_name_unchanged(self):
        assert normalize_name("notes.txt") == "notes.txt"
