"""Interactive selection prompts."""

from typing import Sequence

from rich.markup import escape
from rich.prompt import IntPrompt

from .console import console, create_table, print_error, print_table


def choose(label: str, items: Sequence[str]) -> str:
    """
    Ask the user to pick one item from a numbered list.

    A single item is returned without prompting.

    Args:
        label: Prompt label (e.g. "Choose a pod")
        items: Items to choose from, shown in the given order

    Returns:
        The chosen item

    Raises:
        ValueError: If items is empty
    """
    if not items:
        raise ValueError(f"Nothing to choose from for: {label}")
    if len(items) == 1:
        return items[0]

    table = create_table(label)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Name", style="green")
    for number, item in enumerate(items, start=1):
        table.add_row(str(number), escape(item))
    print_table(table)

    while True:
        number = IntPrompt.ask(label, console=console)
        if 1 <= number <= len(items):
            return items[number - 1]
        print_error(f"Please enter a number between 1 and {len(items)}")
