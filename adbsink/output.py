"""Human-readable console output."""

from typing import Optional

from rich.console import Console


def _displayable(message: str) -> str:
    """Replace undecodable file name bytes so the terminal can print them."""
    return message.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class OutputFormatter:
    """Writes user-facing messages to the terminal.

    Informational messages are suppressed when ``quiet`` is set; errors
    and warnings are always shown (on stderr).
    """

    def __init__(
        self,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: str = "") -> None:
        if not self.quiet:
            self.console.print(_displayable(message), markup=False)

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(f"[INFO] {_displayable(message)}", markup=False)

    def success(self, message: str) -> None:
        if not self.quiet:
            self.console.print(_displayable(message), style="green", markup=False)

    def warning(self, message: str) -> None:
        self.err_console.print(_displayable(message), style="yellow", markup=False)

    def error(self, message: str) -> None:
        self.err_console.print(
            f"ERROR: {_displayable(message)}", style="bold red", markup=False
        )

