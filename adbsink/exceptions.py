"""Exceptions raised by adbsink."""

from typing import Optional


class AdbSinkError(Exception):
    """Base exception for all adbsink errors."""


class SyncStructureError(AdbSinkError):
    """A tree listing returned an entry outside of its declared root."""


class FileSystemError(AdbSinkError):
    """A primitive operation against a file tree failed."""


class AdbError(AdbSinkError):
    """An adb invocation failed."""

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.command = command or []
        self.output = output


class AdbNotFoundError(AdbError):
    """The adb binary could not be found."""


class DeviceSelectionError(AdbSinkError):
    """Zero or more than one device is attached."""


class ConfigError(AdbSinkError):
    """Invalid runtime configuration."""
