"""Print the summary of changes made by a merge."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()


def print_changes(changes: list[str], out: Console | None = None) -> None:
    out = out or console
    out.print("Summary of changes:")
    if not changes:
        out.print("No changes made.")
        return
    for change in changes:
        out.print(f"- {escape(change)}", soft_wrap=True, highlight=False)
