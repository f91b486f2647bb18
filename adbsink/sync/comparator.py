"""Per-directory comparison of source and destination files."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils import RESERVED_TRAILING_CHAR, join_path
from .partition import DirectoryBucket
from .scanner import SyncFile

# Reasons shown next to each action
REASON_DNE = "DNE"
REASON_SIZE = "SIZE"
REASON_NEWER = "NEWER"
REASON_IN_SYNC = "in sync"


class SyncAction(str, Enum):
    """Actions that can be taken for a single file."""

    COPY = "copy"
    """Transfer the source file to the destination"""

    SKIP = "skip"
    """Destination already up to date"""

    DELETE = "delete"
    """Remove a destination file with no source counterpart"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Short reason for this decision"""

    source_file: Optional[SyncFile]
    """Source file (if exists)"""

    dest_file: Optional[SyncFile]
    """Destination file (if exists)"""

    dest_path: str
    """Path on the destination the action applies to"""


def normalize_name(name: str) -> str:
    """Strip one reserved trailing character from a file name.

    Some filesystems (Windows) cannot store names ending in ``"."``, so
    ``"notes."`` on the device ends up as ``"notes"`` locally. Comparing
    normalized source names lets orphan detection recognize the pair.
    """
    if name.endswith(RESERVED_TRAILING_CHAR):
        return name[: -len(RESERVED_TRAILING_CHAR)]
    return name


class FileComparator:
    """Decides what to do with the files of one directory."""

    def __init__(self, dest_root: str):
        """Initialize file comparator.

        Args:
            dest_root: Destination root the relative directories hang from
        """
        self.dest_root = dest_root

    def compare_bucket(
        self,
        relative_dir: str,
        source_bucket: DirectoryBucket,
        dest_bucket: Optional[DirectoryBucket],
        delete_orphans: bool = False,
    ) -> list[SyncDecision]:
        """Compare the files directly inside one directory.

        Args:
            relative_dir: Directory being compared ("" for the root)
            source_bucket: Source files in that directory, keyed by name
            dest_bucket: Destination files in that directory, or None if
                the directory does not exist on the destination
            delete_orphans: Whether to emit DELETE decisions for
                destination files with no source counterpart

        Returns:
            Decisions for every source file, followed by orphan deletions
        """
        dest_bucket = dest_bucket or {}
        decisions = [
            self.compare_file(relative_dir, source_bucket[name], dest_bucket.get(name))
            for name in sorted(source_bucket)
        ]
        if delete_orphans:
            decisions.extend(self.find_orphans(source_bucket, dest_bucket))
        return decisions

    def compare_file(
        self,
        relative_dir: str,
        source_file: SyncFile,
        dest_file: Optional[SyncFile],
    ) -> SyncDecision:
        """Compare one source file with its destination counterpart.

        Size differences always win; otherwise only a strictly newer
        source triggers a copy.
        """
        if dest_file is None:
            return SyncDecision(
                action=SyncAction.COPY,
                reason=REASON_DNE,
                source_file=source_file,
                dest_file=None,
                dest_path=join_path(self.dest_root, relative_dir, source_file.name),
            )

        if source_file.size != dest_file.size:
            action, reason = SyncAction.COPY, REASON_SIZE
        elif source_file.mtime > dest_file.mtime:
            action, reason = SyncAction.COPY, REASON_NEWER
        else:
            action, reason = SyncAction.SKIP, REASON_IN_SYNC

        return SyncDecision(
            action=action,
            reason=reason,
            source_file=source_file,
            dest_file=dest_file,
            dest_path=dest_file.path,
        )

    def find_orphans(
        self, source_bucket: DirectoryBucket, dest_bucket: DirectoryBucket
    ) -> list[SyncDecision]:
        """Find destination files that no source file accounts for."""
        normalized_sources = {normalize_name(name) for name in source_bucket}
        orphans: list[SyncDecision] = []
        for name in sorted(dest_bucket):
            if name in source_bucket or name in normalized_sources:
                continue
            dest_file = dest_bucket[name]
            orphans.append(
                SyncDecision(
                    action=SyncAction.DELETE,
                    reason=REASON_DNE,
                    source_file=None,
                    dest_file=dest_file,
                    dest_path=dest_file.path,
                )
            )
        return orphans
