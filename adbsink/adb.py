"""Thin wrapper around the adb executable."""

import logging
import subprocess
import time
from typing import Optional

from .config import Config
from .exceptions import AdbError, AdbNotFoundError, DeviceSelectionError

logger = logging.getLogger(__name__)


class AdbClient:
    """Runs adb commands and returns their output.

    Every call blocks until adb exits. A non-zero exit status is turned
    into an :class:`AdbError` carrying the command and its output.
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize the client.

        Args:
            config: Runtime configuration (adb path, timeout)
        """
        self.config = config or Config()

    def run(self, *args: str) -> str:
        """Run ``adb <args>`` and return combined stdout/stderr.

        Args:
            *args: Arguments passed to adb

        Returns:
            Command output

        Raises:
            AdbNotFoundError: If the adb binary is not available
            AdbError: If adb exits with a non-zero status or times out
        """
        command = [self.config.adb_path, *args]
        logger.debug("Running: %s", " ".join(command))
        start = time.time()
        try:
            proc = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="surrogateescape",
                timeout=self.config.timeout,
            )
        except FileNotFoundError as e:
            raise AdbNotFoundError("adb binary not found", command=command) from e
        except subprocess.TimeoutExpired as e:
            raise AdbError(
                f"adb {args[0]} timed out after {e.timeout}s", command=command
            ) from e
        logger.debug("adb %s took %.2fs", args[0], time.time() - start)

        output = proc.stdout or ""
        if proc.returncode != 0:
            detail = output.strip() or f"exit status {proc.returncode}"
            raise AdbError(f"adb {args[0]} failed: {detail}", command, output)
        return output

    def shell(self, command: str) -> str:
        """Run a shell command line on the device.

        Args:
            command: Command line, already quoted for the device shell

        Returns:
            Command output
        """
        return self.run("shell", command)

    def devices(self) -> str:
        """Return the raw output of ``adb devices``."""
        return self.run("devices")

    def check_single_device(self) -> str:
        """Verify exactly one device is attached and ready.

        Returns:
            The ``adb devices`` listing

        Raises:
            AdbNotFoundError: If the adb binary is not available
            DeviceSelectionError: If zero or several devices are attached
        """
        listing = self.devices()
        connected = [line for line in listing.splitlines() if "\tdevice" in line]
        if len(connected) > 1:
            raise DeviceSelectionError("more than 1 device connected")
        if not connected:
            raise DeviceSelectionError("no device connected")
        return listing

    def pull(self, device_path: str, local_path: str, preserve_timestamp: bool) -> str:
        """Copy a file from the device.

        Args:
            device_path: Source path on the device
            local_path: Destination path on this machine
            preserve_timestamp: Ask adb to keep the file's modification time

        Returns:
            adb's transfer report
        """
        if preserve_timestamp:
            return self.run("pull", "-a", device_path, local_path)
        return self.run("pull", device_path, local_path)

    def push(self, local_path: str, device_path: str) -> str:
        """Copy a file to the device.

        adb push does not reliably keep modification times, so callers
        that need them must set them afterwards.

        Args:
            local_path: Source path on this machine
            device_path: Destination path on the device

        Returns:
            adb's transfer report
        """
        return self.run("push", local_path, device_path)
