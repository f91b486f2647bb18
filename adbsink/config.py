"""Runtime configuration for adbsink."""

import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigError

ADB_PATH_ENV = "ADBSINK_ADB"
TIMEOUT_ENV = "ADBSINK_TIMEOUT"


@dataclass(frozen=True)
class Config:
    """Settings resolved once at startup."""

    adb_path: str = "adb"
    """adb executable (name on PATH or absolute path)"""

    timeout: Optional[float] = None
    """Per-command timeout in seconds (None waits indefinitely)"""

    @classmethod
    def from_env(cls, adb_path: Optional[str] = None) -> "Config":
        """Build a Config from the environment.

        Args:
            adb_path: Explicit adb executable, overriding ``ADBSINK_ADB``

        Returns:
            Config instance
        """
        timeout: Optional[float] = None
        raw_timeout = os.environ.get(TIMEOUT_ENV)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(
                    f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}"
                ) from None
        return cls(
            adb_path=adb_path or os.environ.get(ADB_PATH_ENV) or "adb",
            timeout=timeout,
        )
