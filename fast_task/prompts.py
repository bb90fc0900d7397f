"""Terminal prompts used by the interactive commands."""

from typing import Protocol

import click
import typer
from rich import print as rprint
from rich.table import Table


class Prompter(Protocol):
    def select(self, message: str, options: list[str], help_text: str = "") -> str: ...

    def text(self, message: str, help_text: str = "", hide_input: bool = False) -> str: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...

    def show(self, message: str) -> None: ...


class TerminalPrompter:
    """Prompter backed by typer prompts, with choice lists rendered by rich."""

    def select(self, message: str, options: list[str], help_text: str = "") -> str:
        table = Table(title=message, show_header=False, title_justify="left")
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Option")
        for index, option in enumerate(options, start=1):
            table.add_row(str(index), option)
        rprint(table)
        if help_text:
            rprint(f"[dim]{help_text}[/dim]")
        picked = typer.prompt("Choice", type=click.IntRange(1, len(options)), default=1 if len(options) == 1 else None)
        return options[picked - 1]

    def text(self, message: str, help_text: str = "", hide_input: bool = False) -> str:
        if help_text:
            rprint(f"[dim]{help_text}[/dim]")
        # Empty input is returned as-is; callers decide whether to re-prompt.
        return typer.prompt(message, default="", show_default=False, hide_input=hide_input)

    def confirm(self, message: str, default: bool = False) -> bool:
        return typer.confirm(message, default=default)

    def show(self, message: str) -> None:
        rprint(message)
