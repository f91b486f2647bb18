"""Sync engine for adbsink - one-directional tree synchronization."""

from .comparator import FileComparator, SyncAction, SyncDecision, normalize_name
from .empty_dirs import EmptyDirPlan, EmptyDirReconciler
from .engine import SyncEngine, destination_root
from .filesystem import AndroidFileSystem, FileSystem, LocalFileSystem
from .ignore import IgnoreFilter
from .modes import SyncDirection
from .operations import SyncOperations
from .options import SyncOptions
from .partition import DirectoryBucket, DirFileMap, partition_by_directory
from .scanner import SyncFile, TreeListing, find_empty_dirs

__all__ = [
    "SyncEngine",
    "SyncDirection",
    "SyncOptions",
    "SyncOperations",
    "destination_root",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "normalize_name",
    "EmptyDirPlan",
    "EmptyDirReconciler",
    "FileSystem",
    "LocalFileSystem",
    "AndroidFileSystem",
    "IgnoreFilter",
    "DirectoryBucket",
    "DirFileMap",
    "partition_by_directory",
    "SyncFile",
    "TreeListing",
    "find_empty_dirs",
]
