"""Console output and logging setup for the qmims CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route ``logging`` through Rich; DEBUG when verbose, else WARNING."""
    root = logging.getLogger("qmims")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


class Reporter:
    """Single place where user-facing lines are written.

    Info and success lines go to stdout; warnings and errors go to stderr.
    Debug lines are only shown in verbose mode. Rich handles line endings for
    the platform, so callers never append terminators themselves.
    """

    def __init__(
        self,
        verbose: bool = False,
        out: Console | None = None,
        err: Console | None = None,
    ) -> None:
        self.verbose = verbose
        self.out = out or console
        self.err = err or err_console

    def line(self, message: str = "", style: str | None = None) -> None:
        self.out.print(message, style=style, highlight=False)

    def info(self, message: str) -> None:
        self.line(message)

    def success(self, message: str) -> None:
        self.line(f"[green]{message}[/green]")

    def warn(self, message: str) -> None:
        self.err.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        self.err.print(f"[red]Error:[/red] {escape(message)}", highlight=False)

    def debug(self, message: str) -> None:
        if self.verbose:
            self.line(f"[cyan]\\[DEBUG][/cyan] {escape(message)}")


__all__ = ["console", "err_console", "setup_logging", "Reporter"]
