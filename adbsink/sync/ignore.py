"""Ignored directory prefixes."""

from typing import Iterable


class IgnoreFilter:
    """Matches relative directory paths against literal prefixes.

    The test is a plain string prefix test, not path-segment aware:
    the prefix ``"DCIM/.thumb"`` also ignores ``"DCIM/.thumbnails"``.

    Examples:
        >>> ignore = IgnoreFilter(["Android/data"])
        >>> ignore.is_ignored("Android/data/com.example")
        True
        >>> ignore.is_ignored("Android/media")
        False
    """

    def __init__(self, prefixes: Iterable[str] = ()):
        self.prefixes = tuple(p for p in prefixes if p)

    def __bool__(self) -> bool:
        return bool(self.prefixes)

    def is_ignored(self, relative_dir: str) -> bool:
        """Check whether a relative directory path is ignored."""
        return any(relative_dir.startswith(prefix) for prefix in self.prefixes)

    def filter_dirs(self, relative_dirs: Iterable[str]) -> set[str]:
        """Return the relative directories that are not ignored."""
        return {d for d in relative_dirs if not self.is_ignored(d)}
