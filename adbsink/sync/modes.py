"""Sync direction definitions."""

from enum import Enum


class SyncDirection(str, Enum):
    """Which side of the adb bridge plays the source role."""

    PULL = "pull"
    """Device tree is the source, local tree is the destination"""

    PUSH = "push"
    """Local tree is the source, device tree is the destination"""

    @property
    def transfer_preserves_mtime(self) -> bool:
        """Whether the transfer itself can imprint the source mtime.

        ``adb pull -a`` keeps timestamps; ``adb push`` cannot be trusted
        to, so pushed files get their mtime set explicitly afterwards.
        """
        return self == SyncDirection.PULL

    @property
    def source_is_device(self) -> bool:
        return self == SyncDirection.PULL
