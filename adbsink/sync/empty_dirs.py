"""Reconciliation of directories that hold no files."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import AdbSinkError
from ..output import OutputFormatter
from ..utils import join_path
from .filesystem import FileSystem
from .ignore import IgnoreFilter

logger = logging.getLogger(__name__)


@dataclass
class EmptyDirPlan:
    """Relative directories to create and remove on the destination."""

    to_create: list[str] = field(default_factory=list)
    to_delete: list[str] = field(default_factory=list)


def prune_nested(paths: list[str]) -> list[str]:
    """Drop paths that lie beneath another path in the list.

    Removing a directory recursively also removes its descendants, so
    only the outermost directories need to be removed. Duplicates are
    collapsed.
    """
    unique = set(paths)
    return sorted(
        path
        for path in unique
        if not any(path.startswith(other + "/") for other in unique)
    )


class EmptyDirReconciler:
    """Mirrors empty source directories onto the destination."""

    def __init__(
        self,
        dest_fs: FileSystem,
        output: OutputFormatter,
        ignore: Optional[IgnoreFilter] = None,
    ):
        self.dest_fs = dest_fs
        self.output = output
        self.ignore = ignore or IgnoreFilter()

    def plan(
        self,
        source_empty: set[str],
        dest_empty: set[str],
        delete_orphans: bool,
        source_dirs: Optional[set[str]] = None,
    ) -> EmptyDirPlan:
        """Work out which empty directories to create and remove.

        Creation and deletion are independent set differences; a
        directory empty on both sides is left alone.

        Args:
            source_empty: Relative paths empty on the source
            dest_empty: Relative paths empty on the destination
            delete_orphans: Whether destination-only empty dirs are removed
            source_dirs: Every relative directory existing on the source;
                an empty destination directory that exists on the source
                (with files beneath it) is kept

        Returns:
            EmptyDirPlan
        """
        source_empty = self.ignore.filter_dirs(source_empty)
        plan = EmptyDirPlan(to_create=sorted(source_empty - dest_empty))
        if delete_orphans:
            keep = source_dirs or set()
            candidates = [
                d
                for d in dest_empty - source_empty
                if d not in keep and not self.ignore.is_ignored(d)
            ]
            plan.to_delete = prune_nested(candidates)
        return plan

    def apply(self, plan: EmptyDirPlan, dest_root: str, dry_run: bool = False) -> dict:
        """Apply a plan to the destination tree.

        Creation failures propagate; removal failures are reported and
        skipped.

        Args:
            plan: Plan returned by :meth:`plan`
            dest_root: Destination root
            dry_run: Report without touching the destination

        Returns:
            Dictionary with ``created``, ``deleted`` and ``failed`` counts
        """
        stats = {"created": 0, "deleted": 0, "failed": 0}

        for relative_dir in plan.to_create:
            path = join_path(dest_root, relative_dir)
            self.output.info(f"MKDIR (EMPTY): '{path}'")
            if not dry_run:
                self.dest_fs.mkdir(path)
            stats["created"] += 1

        for relative_dir in plan.to_delete:
            path = join_path(dest_root, relative_dir)
            self.output.info(f"DEL EMPTY DIR: '{path}'")
            if dry_run:
                stats["deleted"] += 1
                continue
            try:
                self.dest_fs.rm_dir(path)
                stats["deleted"] += 1
            except AdbSinkError as e:
                logger.debug("Removing %s failed", path, exc_info=True)
                self.output.warning(f"could not delete: '{e}'")
                stats["failed"] += 1

        return stats
