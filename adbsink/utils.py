"""Utility functions for adbsink."""

import posixpath
from typing import Optional

from .exceptions import SyncStructureError

# Character some filesystems refuse at the end of a file name
RESERVED_TRAILING_CHAR = "."


def join_path(root: str, *parts: str) -> str:
    """Join path components using forward slashes, skipping empty ones.

    Args:
        root: Base path
        *parts: Relative components to append

    Returns:
        Joined path string

    Examples:
        >>> join_path("/sdcard/DCIM", "", "a.jpg")
        '/sdcard/DCIM/a.jpg'
    """
    path = root
    for part in parts:
        if part:
            path = posixpath.join(path, part) if path else part
    return path


def normalize_path(path: str) -> str:
    """Normalize a path to forward slashes without a trailing separator."""
    normalized = path.replace("\\", "/")
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized


def relative_to_root(path: str, root: str) -> str:
    """Strip ``root`` from ``path``.

    Args:
        path: Path rooted at ``root``
        root: Root prefix

    Returns:
        Relative path ("" for the root itself)

    Raises:
        SyncStructureError: If ``path`` is not located under ``root``
    """
    root = normalize_path(root)
    path = normalize_path(path)
    if path == root:
        return ""
    prefix = root if root.endswith("/") else root + "/"
    if not path.startswith(prefix):
        raise SyncStructureError(f"'{path}' is not located under '{root}'")
    return path[len(prefix) :]


def parent_dir(relative_path: str) -> str:
    """Return the parent directory of a relative path ("" at top level)."""
    return posixpath.dirname(relative_path)


def base_name(path: str) -> Optional[str]:
    """Return the final component of a path, or None if there is none."""
    name = posixpath.basename(normalize_path(path))
    if name in ("", ".", ".."):
        return None
    return name


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
