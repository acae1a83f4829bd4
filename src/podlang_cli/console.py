"""Console output utilities.

Usage:
    from podlang_cli.console import console, print_success, print_error

    print_success("Operation completed")
    print_error("Something went wrong")

Messages passed to the print_* helpers are plain text: rich markup in them
(e.g. a heuristic like "[ -f go.mod ]") is escaped, not rendered.
"""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console(soft_wrap=True)


def print_success(message: str) -> None:
    """Print a success message (green checkmark)."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message (red X)."""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message (yellow warning sign)."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message (blue info sign)."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def print_plain(text: str) -> None:
    """Print text verbatim, without markup or highlighting."""
    console.print(text, markup=False, highlight=False)


def create_table(title: str = "") -> Table:
    """Create a rich Table."""
    return Table(title=title) if title else Table()


def print_table(table: Any) -> None:
    """Print a table."""
    console.print(table)


__all__ = [
    "console",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_plain",
    "create_table",
    "print_table",
]
