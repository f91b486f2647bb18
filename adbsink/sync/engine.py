"""Core sync engine for executing sync operations."""

import logging
import time
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..exceptions import AdbSinkError, ConfigError, FileSystemError
from ..output import OutputFormatter
from ..utils import (
    base_name,
    format_size,
    join_path,
    normalize_path,
    parent_dir,
    relative_to_root,
)
from .comparator import FileComparator, SyncAction, SyncDecision
from .empty_dirs import EmptyDirReconciler, prune_nested
from .filesystem import FileSystem
from .ignore import IgnoreFilter
from .operations import SyncOperations
from .options import SyncOptions
from .partition import DirectoryBucket, DirFileMap, partition_by_directory
from .scanner import with_ancestors

logger = logging.getLogger(__name__)


def destination_root(source: str, dest: str) -> str:
    """Place the source directory's name beneath ``dest``.

    Examples:
        >>> destination_root("/sdcard/DCIM", "backup")
        'backup/DCIM'

    Raises:
        ConfigError: If ``source`` has no final path component
    """
    name = base_name(source)
    if name is None:
        raise ConfigError(f"Cannot determine directory name of '{source}'")
    return join_path(normalize_path(dest), name)


class SyncEngine:
    """Makes a destination tree match a source tree in one pass."""

    def __init__(
        self,
        source_fs: FileSystem,
        dest_fs: FileSystem,
        operations: SyncOperations,
        output: Optional[OutputFormatter] = None,
    ):
        """Initialize sync engine.

        Args:
            source_fs: Tree adapter files are read from
            dest_fs: Tree adapter files are written to
            operations: Transfer primitive between the two trees
            output: Output formatter for displaying progress/status
        """
        self.source_fs = source_fs
        self.dest_fs = dest_fs
        self.operations = operations
        self.output = output or OutputFormatter()

    def synchronize(
        self, source_root: str, dest_root: str, options: SyncOptions
    ) -> dict:
        """Synchronize ``dest_root`` with ``source_root``.

        Both trees are listed in full before anything is changed. Every
        source directory is then matched against its destination
        counterpart, empty directories are reconciled and, when
        ``options.delete_orphans`` is set, destination-only directories
        are removed.

        Args:
            source_root: Root of the source tree
            dest_root: Root of the destination tree (created if missing)
            options: Options for this run

        Returns:
            Dictionary with sync statistics

        Raises:
            SyncStructureError: If a listing returned paths outside its root
            AdbSinkError: If a primitive fails during the main pass

        Examples:
            >>> engine = SyncEngine(android_fs, local_fs, operations)
            >>> stats = engine.synchronize("/sdcard/DCIM", "backup/DCIM", options)
            >>> print(f"Copied {stats['copied']} files")
        """
        start_time = time.time()
        source_root = normalize_path(source_root)
        dest_root = normalize_path(dest_root)
        ignore = IgnoreFilter(options.ignored_prefixes)
        stats = self._create_empty_stats()

        if not self.source_fs.exists(source_root):
            raise FileSystemError(f"Source does not exist: {source_root}")

        # Step 1: Snapshot both trees
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet,
        ) as progress:
            task = progress.add_task("Listing source directory...", total=None)
            source_listing = self.source_fs.get_all_files(source_root)
            progress.update(
                task,
                description=f"Found {len(source_listing.files)} source file(s)",
            )

            task = progress.add_task("Listing destination directory...", total=None)
            dest_listing = self.dest_fs.get_all_files(dest_root)
            progress.update(
                task,
                description=f"Found {len(dest_listing.files)} destination file(s)",
            )
        logger.debug(
            "Source: %d file(s), destination: %d file(s)",
            len(source_listing.files),
            len(dest_listing.files),
        )

        source_map = partition_by_directory(source_listing.files, source_root)
        dest_map = partition_by_directory(dest_listing.files, dest_root)
        source_empty = ignore.filter_dirs(
            relative_to_root(d, source_root) for d in source_listing.empty_dirs
        )
        dest_empty = {relative_to_root(d, dest_root) for d in dest_listing.empty_dirs}
        source_dirs = with_ancestors(set(source_map) | source_empty)
        # Destination directories that must survive orphan removal
        protected_dirs = source_dirs | with_ancestors(
            d for d in set(dest_map) | dest_empty if ignore.is_ignored(d)
        )

        # Step 2: Make sure the destination root exists
        if not self.dest_fs.exists(dest_root):
            self.output.info(f"MKDIR: '{dest_root}'")
            if not options.dry_run:
                self.dest_fs.mkdir(dest_root)
            stats["dirs_created"] += 1

        # The root is always compared so orphans directly inside it are
        # handled file by file rather than by removing the whole root
        source_map.setdefault("", {})

        # Step 3: Compare and apply, one directory at a time
        comparator = FileComparator(dest_root)
        for relative_dir in sorted(source_map):
            dest_bucket = dest_map.pop(relative_dir, None)
            if ignore.is_ignored(relative_dir):
                self.output.info(f"SKIP DIR (IGNORED): {relative_dir}")
                stats["ignored"] += 1
                continue
            self._sync_bucket(
                comparator,
                relative_dir,
                source_map[relative_dir],
                dest_bucket,
                dest_root,
                options,
                stats,
            )

        # Step 4: Empty directories
        reconciler = EmptyDirReconciler(self.dest_fs, self.output, ignore)
        plan = reconciler.plan(
            source_empty, dest_empty, options.delete_orphans, source_dirs
        )
        empty_stats = reconciler.apply(plan, dest_root, dry_run=options.dry_run)
        stats["dirs_created"] += empty_stats["created"]
        stats["dirs_deleted"] += empty_stats["deleted"]
        stats["delete_failures"] += empty_stats["failed"]

        # Step 5: Directories that only exist on the destination
        if options.delete_orphans:
            self._delete_remaining(
                dest_map, dest_root, protected_dirs, ignore, options, stats
            )

        logger.debug("Sync took %.2fs", time.time() - start_time)
        if not self.output.quiet:
            self._display_summary(stats, options.dry_run)
        return stats

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary.

        Returns:
            Dictionary with zero counts for all stat categories
        """
        return {
            "copied": 0,
            "bytes_copied": 0,
            "skipped": 0,
            "dirs_created": 0,
            "files_deleted": 0,
            "dirs_deleted": 0,
            "ignored": 0,
            "delete_failures": 0,
        }

    def _sync_bucket(
        self,
        comparator: FileComparator,
        relative_dir: str,
        source_bucket: DirectoryBucket,
        dest_bucket: Optional[DirectoryBucket],
        dest_root: str,
        options: SyncOptions,
        stats: dict,
    ) -> None:
        """Bring one destination directory in line with the source.

        Args:
            comparator: Comparator bound to the destination root
            relative_dir: Directory being synced
            source_bucket: Source files directly in the directory
            dest_bucket: Destination files directly in the directory, or
                None if the directory is missing on the destination
            dest_root: Destination root
            options: Options for this run
            stats: Statistics dictionary (modified in place)
        """
        if dest_bucket is None and relative_dir:
            path = join_path(dest_root, relative_dir)
            self.output.info(f"MKDIR: '{path}'")
            if not options.dry_run:
                self.dest_fs.mkdir(path)
            stats["dirs_created"] += 1

        decisions = comparator.compare_bucket(
            relative_dir,
            source_bucket,
            dest_bucket,
            # Orphans only exist where the destination directory did
            delete_orphans=options.delete_orphans and dest_bucket is not None,
        )
        for decision in decisions:
            self._execute_decision(decision, options, stats)

    def _execute_decision(
        self, decision: SyncDecision, options: SyncOptions, stats: dict
    ) -> None:
        """Execute a single sync decision.

        Errors propagate; nothing already applied is rolled back.
        """
        if decision.action == SyncAction.SKIP:
            stats["skipped"] += 1
            return

        if decision.action == SyncAction.COPY and decision.source_file:
            source_file = decision.source_file
            label = f"{self.operations.direction.value} ({decision.reason})"
            if options.dry_run:
                self.output.info(f"{label} {source_file.path} -> {decision.dest_path}")
            else:
                report = self.operations.transfer(
                    source_file, decision.dest_path, options.propagate_mtime
                )
                self.output.info(f"{label} {report}")
            stats["copied"] += 1
            stats["bytes_copied"] += source_file.size

        elif decision.action == SyncAction.DELETE:
            self.output.info(f"DEL ({decision.reason}): '{decision.dest_path}'")
            if not options.dry_run:
                self.dest_fs.rm_file(decision.dest_path)
            stats["files_deleted"] += 1

    def _delete_remaining(
        self,
        dest_map: DirFileMap,
        dest_root: str,
        protected_dirs: set[str],
        ignore: IgnoreFilter,
        options: SyncOptions,
        stats: dict,
    ) -> None:
        """Remove destination directories the source pass never visited.

        A leftover directory that must stay (it exists on the source as
        the parent of other directories, or holds ignored directories)
        only loses its files. Any other leftover is removed recursively,
        starting from its outermost ancestor that is not protected.
        Removal failures are reported and do not stop the run.

        Args:
            dest_map: Destination buckets not consumed by the source pass
            dest_root: Destination root
            protected_dirs: Relative directories that must not be removed
            ignore: Ignored prefixes, exempt from deletion
            options: Options for this run
            stats: Statistics dictionary (modified in place)
        """
        leftovers = sorted(d for d in dest_map if not ignore.is_ignored(d))
        comparator = FileComparator(dest_root)
        for relative_dir in leftovers:
            if relative_dir in protected_dirs:
                for decision in comparator.find_orphans({}, dest_map[relative_dir]):
                    self._execute_decision(decision, options, stats)

        orphan_dirs = prune_nested(
            [
                self._outermost_orphan(d, protected_dirs)
                for d in leftovers
                if d not in protected_dirs
            ]
        )
        for relative_dir in orphan_dirs:
            path = join_path(dest_root, relative_dir)
            self.output.info(f"DEL DIR: '{path}'")
            if options.dry_run:
                stats["dirs_deleted"] += 1
                continue
            try:
                self.dest_fs.rm_dir(path)
                stats["dirs_deleted"] += 1
            except AdbSinkError as e:
                logger.debug("Removing %s failed", path, exc_info=True)
                self.output.warning(f"could not delete: '{e}'")
                stats["delete_failures"] += 1

    @staticmethod
    def _outermost_orphan(relative_dir: str, protected_dirs: set[str]) -> str:
        """Climb to the highest ancestor that may be removed."""
        current = relative_dir
        parent = parent_dir(current)
        while parent and parent not in protected_dirs:
            current = parent
            parent = parent_dir(current)
        return current

    def _display_summary(self, stats: dict, dry_run: bool) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
            dry_run: Whether this was a dry run
        """
        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Sync complete!")

        total_actions = (
            stats["copied"]
            + stats["files_deleted"]
            + stats["dirs_deleted"]
            + stats["dirs_created"]
        )
        if total_actions > 0:
            self.output.info(f"Total actions: {total_actions}")
            if stats["copied"] > 0:
                self.output.info(
                    f"  Copied: {stats['copied']} "
                    f"({format_size(stats['bytes_copied'])})"
                )
            if stats["dirs_created"] > 0:
                self.output.info(f"  Directories created: {stats['dirs_created']}")
            if stats["files_deleted"] > 0:
                self.output.info(f"  Files deleted: {stats['files_deleted']}")
            if stats["dirs_deleted"] > 0:
                self.output.info(f"  Directories deleted: {stats['dirs_deleted']}")
        else:
            self.output.info("No changes needed - everything is in sync!")

        if stats["delete_failures"] > 0:
            self.output.warning(
                f"  {stats['delete_failures']} directory removal(s) failed"
            )
