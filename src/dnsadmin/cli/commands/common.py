"""Helpers shared by the CLI command modules."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from rich.console import Console
from rich.text import Text

from dnsadmin.core.exceptions import DNSAdminError

console = Console()
err_console = Console(stderr=True)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Render core errors in red and exit with status 1."""
    try:
        yield
    except DNSAdminError as e:
        err_console.print(Text(f"✗ {e}", style="red"), soft_wrap=True)
        raise typer.Exit(code=1)


def read_input_file(file: Path) -> str:
    try:
        with open(file, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(Text(f"✗ Cannot read {file}: {e}", style="red"), soft_wrap=True)
        raise typer.Exit(code=1)


def print_diff(diff: str) -> None:
    """Print a unified diff, colouring added and removed lines."""
    if not diff:
        console.print("[green]✓ No differences[/]")
        return

    for line in diff.splitlines():
        if line.startswith(("+++", "---")):
            style = "bold"
        elif line.startswith("+"):
            style = "green"
        elif line.startswith("-"):
            style = "red"
        elif line.startswith("@@"):
            style = "cyan"
        else:
            style = ""
        console.print(Text(line, style=style), soft_wrap=True)


def confirm_or_abort(message: str, force: bool) -> None:
    if not force and not typer.confirm(message):
        console.print("[yellow]Aborted[/]")
        raise typer.Exit(code=1)
