"""Grouping of flat file listings into per-directory buckets."""

from ..utils import relative_to_root
from .scanner import SyncFile

DirectoryBucket = dict[str, SyncFile]
"""Files directly inside one directory, keyed by name"""

DirFileMap = dict[str, DirectoryBucket]
"""Relative directory path ("" for the root) to its bucket"""


def partition_by_directory(files: list[SyncFile], root: str) -> DirFileMap:
    """Group files by the relative directory that directly contains them.

    Args:
        files: Flat listing of a tree
        root: Root the listing was taken from

    Returns:
        Mapping of relative directory path to bucket

    Raises:
        SyncStructureError: If a file's path is not under ``root``
    """
    dir_file_map: DirFileMap = {}
    for f in files:
        dir_file_map.setdefault(f.relative_dir(root), {})[f.name] = f
    return dir_file_map
