"""Operator-facing console output and logging setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from couchbase_installer.install import InstallPlan


class TUI:
    """Text User Interface for install-couchbase-server (non-interactive)."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize TUI.

        Args:
            console: Rich console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_plan(self, plan: InstallPlan) -> None:
        """Display the resolved install plan.

        Args:
            plan: Plan about to be executed.
        """
        request = plan.request
        table = Table(title="Couchbase Server Install", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")

        table.add_row("Platform", plan.platform.display_name)
        table.add_row("Edition", request.edition.value)
        table.add_row("Version", request.version)
        table.add_row("Checksum type", request.checksum_type.value)
        table.add_row("Checksum", request.checksum or f"published at {plan.checksum_url}")
        table.add_row("Package", plan.artifact_url)
        table.add_row("Swappiness", str(request.swappiness))

        self.console.print(table)

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]\u2713[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]\u2717[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        """Show info message.

        Args:
            message: Info message.
        """
        self.console.print(f"[blue]i[/blue] {message}")


def configure_logging(verbosity: int) -> None:
    """Route log records to stderr through rich.

    Args:
        verbosity: 0 for warnings, 1 for info, 2 or more for debug.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setLevel(level)
    root.addHandler(handler)
