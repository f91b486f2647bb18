"""Options for a single synchronization run."""

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class SyncOptions:
    """Immutable configuration for one ``synchronize`` call."""

    propagate_mtime: bool = False
    """Copy the source modification time onto every transferred file"""

    delete_orphans: bool = False
    """Delete destination files and directories with no source counterpart"""

    ignored_prefixes: frozenset[str] = field(default_factory=frozenset)
    """Relative directory prefixes excluded from the run"""

    dry_run: bool = False
    """Report decisions without touching either tree"""

    def __post_init__(self) -> None:
        # Accept any iterable (e.g. a click tuple) and freeze it
        if not isinstance(self.ignored_prefixes, frozenset):
            object.__setattr__(
                self, "ignored_prefixes", frozenset(self.ignored_prefixes)
            )

    @classmethod
    def create(
        cls,
        propagate_mtime: bool = False,
        delete_orphans: bool = False,
        ignored_prefixes: Iterable[str] = (),
        dry_run: bool = False,
    ) -> "SyncOptions":
        """Build options from loosely typed values (e.g. CLI arguments)."""
        return cls(
            propagate_mtime=propagate_mtime,
            delete_orphans=delete_orphans,
            ignored_prefixes=frozenset(p for p in ignored_prefixes if p),
            dry_run=dry_run,
        )
