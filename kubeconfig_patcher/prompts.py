"""Terminal prompts: single-select, text input, confirm and multi-line paste."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from kubeconfig_patcher.errors import PromptError

logger = logging.getLogger(__name__)

PASTE_TERMINATOR = "."


def validate_selection(selection: str, options: list[str]) -> str | None:
    """
    Match user input against the available options.

    Accepts an exact name, a 1-based number, a case-insensitive name, or a
    partial name that matches exactly one option.
    """
    selection = selection.strip()
    if not selection:
        return None

    for option in options:
        if option == selection:
            return option

    if selection.isdigit():
        idx = int(selection)
        if 1 <= idx <= len(options):
            return options[idx - 1]

    for option in options:
        if option.lower() == selection.lower():
            return option

    matches = [o for o in options if selection.lower() in o.lower()]
    if len(matches) == 1:
        return matches[0]

    return None


@contextmanager
def interactive(what: str) -> Iterator[None]:
    """Turn an interrupted or closed input stream into a PromptError."""
    try:
        yield
    except KeyboardInterrupt as exc:
        raise PromptError(f"Error {what}: interrupted") from exc
    except EOFError as exc:
        raise PromptError(f"Error {what}: input stream closed") from exc


class Prompter:
    """Blocking prompts rendered with rich on standard error."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def select(self, title: str, options: list[str]) -> str:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Name", style="green")
        for idx, option in enumerate(options, 1):
            table.add_row(str(idx), escape(option))
        self.console.print(table)

        with interactive(f"selecting from '{title}'"):
            while True:
                raw = Prompt.ask("Selection", console=self.console)
                choice = validate_selection(raw, options)
                if choice is not None:
                    logger.info(f"Selected {choice!r} for {title!r}")
                    return choice
                self.console.print(f"[red]Invalid selection: {escape(raw)}[/red]")

    def text(self, title: str) -> str:
        with interactive(f"reading '{title}'"):
            while True:
                value = Prompt.ask(escape(title), console=self.console).strip()
                if value:
                    return value
                self.console.print("[yellow]A value is required.[/yellow]")

    def confirm(self, title: str) -> bool:
        with interactive(f"confirming '{title}'"):
            return Confirm.ask(escape(title), console=self.console, default=False)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def paste(self, title: str) -> str:
        """Read lines until a lone '.' or end of input (Ctrl+D)."""
        self.console.print(f"[bold]{escape(title)}[/bold]")
        self.console.print(
            f"[dim]Finish with a line containing only '{PASTE_TERMINATOR}' or Ctrl+D[/dim]"
        )
        lines: list[str] = []
        with interactive(f"reading '{title}'"):
            while True:
                try:
                    line = self.console.input()
                except EOFError:
                    break
                if line.strip() == PASTE_TERMINATOR:
                    break
                lines.append(line)
        logger.info(f"Read {len(lines)} pasted lines")
        return "\n".join(lines) + "\n" if lines else ""
