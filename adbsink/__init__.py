"""adbsink - Pull and push directory trees to and from Android devices."""

from .adb import AdbClient
from .config import Config
from .exceptions import (
    AdbError,
    AdbNotFoundError,
    AdbSinkError,
    ConfigError,
    DeviceSelectionError,
    FileSystemError,
    SyncStructureError,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "AdbClient",
    "Config",
    "AdbError",
    "AdbNotFoundError",
    "AdbSinkError",
    "ConfigError",
    "DeviceSelectionError",
    "FileSystemError",
    "SyncStructureError",
]
