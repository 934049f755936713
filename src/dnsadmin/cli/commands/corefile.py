"""Corefile commands."""

from pathlib import Path

from rich.syntax import Syntax

from dnsadmin.cli.commands.common import console, handle_errors, print_diff, read_input_file
from dnsadmin.core.compare import DiffGenerator


def show(options):
    with handle_errors():
        content = options.config().corefile_manager().read()
    console.print(Syntax(content, "text", theme="monokai", line_numbers=True))


def validate(file: Path, options):
    content = read_input_file(file)
    with handle_errors():
        options.config().corefile_manager().validate(content)
    console.print("[green]✓ Corefile is valid[/]")


def diff(file: Path, options):
    """Preview the change ``apply`` would make."""
    content = read_input_file(file)
    with handle_errors():
        current = options.config().corefile_manager().read()
    print_diff(DiffGenerator().diff("Corefile", current, content))


def apply(file: Path, options):
    """Validate and atomically replace the Corefile."""
    content = read_input_file(file)
    with handle_errors():
        manager = options.config().corefile_manager()
        manager.validate(content)
        manager.write(content)
    console.print("[green]✓ Saved Corefile[/]")
