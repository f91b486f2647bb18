"""File listing types shared by all tree adapters."""

import posixpath
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

from ..utils import normalize_path, parent_dir, relative_to_root


@dataclass(frozen=True)
class SyncFile:
    """A single file known to one of the trees."""

    path: str
    """Full path, forward-slash separated, rooted at the listed root"""

    name: str
    """Final path component"""

    size: int = field(compare=False)
    """File size in bytes"""

    mtime: int = field(compare=False)
    """Modification time, whole seconds since the epoch"""

    @classmethod
    def from_path(cls, path: str, size: int, mtime: float) -> "SyncFile":
        """Create a SyncFile, deriving the name and truncating mtime.

        Args:
            path: Full path of the file
            size: Size in bytes
            mtime: Modification time (fractional seconds are dropped)

        Returns:
            SyncFile instance
        """
        path = normalize_path(path)
        return cls(
            path=path,
            name=posixpath.basename(path),
            size=int(size),
            mtime=int(mtime),
        )

    def relative_dir(self, root: str) -> str:
        """Relative directory containing this file ("" for the root)."""
        return parent_dir(relative_to_root(self.path, root))


class TreeListing(NamedTuple):
    """Result of listing a tree recursively."""

    files: list[SyncFile]
    """Every file beneath the root"""

    empty_dirs: list[str]
    """Directories with no file anywhere in their subtree"""


def find_empty_dirs(
    root: str, dirs: Iterable[str], files: Iterable[SyncFile]
) -> list[str]:
    """Select directories that contain no file anywhere beneath them.

    A directory is non-empty if it is the parent of a listed file or an
    ancestor of such a parent. The root itself is never reported.

    Args:
        root: Root the listing was taken from
        dirs: Every directory path found beneath ``root``
        files: Every file found beneath ``root``

    Returns:
        Sorted list of empty directory paths (full paths)
    """
    root = normalize_path(root)
    occupied: set[str] = set()
    for f in files:
        current = f.relative_dir(root)
        while current and current not in occupied:
            occupied.add(current)
            current = parent_dir(current)

    empty: list[str] = []
    for d in dirs:
        d = normalize_path(d)
        rel = relative_to_root(d, root)
        if rel and rel not in occupied:
            empty.append(d)
    return sorted(empty)


def with_ancestors(relative_dirs: Iterable[str]) -> set[str]:
    """Expand relative directories with all of their ancestors.

    The root ("") is not included.
    """
    expanded: set[str] = set()
    for current in relative_dirs:
        while current and current not in expanded:
            expanded.add(current)
            current = parent_dir(current)
    return expanded
