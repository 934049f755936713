"""Hosts file commands."""

from pathlib import Path

from rich.table import Table

from dnsadmin.cli.commands.common import (
    confirm_or_abort,
    console,
    handle_errors,
    print_diff,
    read_input_file,
)
from dnsadmin.core.compare import DiffGenerator


def list_hosts(options):
    with handle_errors():
        manager = options.config().hosts_manager()
        domains = manager.list()

    if not domains:
        console.print("[yellow]No host files found[/]")
        return

    table = Table(title="Host Files")
    table.add_column("Domain", style="cyan")
    table.add_column("File")
    for domain in domains:
        table.add_row(domain, manager.filename(domain).name)
    console.print(table)


def show(domain: str, options):
    """Show the entries of a hosts file."""
    with handle_errors():
        host_file = options.config().hosts_manager().read(domain)

    if not host_file.entries:
        console.print(f"[yellow]No entries in {domain}[/]")
        return

    table = Table(title=f"{domain} Hosts")
    table.add_column("IP", style="green")
    table.add_column("Hostname", style="cyan")
    for entry in host_file.entries:
        table.add_row(entry.ip, entry.hostname)
    console.print(table)


def create(domain: str, options):
    with handle_errors():
        options.config().hosts_manager().create(domain)
    console.print(f"[green]✓ Created host file {domain}[/]")


def delete(domain: str, force: bool, options):
    confirm_or_abort(f"Delete host file for {domain}?", force)
    with handle_errors():
        options.config().hosts_manager().delete(domain)
    console.print(f"[green]✓ Deleted host file {domain}[/]")


def add(domain: str, ip: str, hostname: str, options):
    with handle_errors():
        options.config().hosts_manager().add_entry(domain, ip, hostname)
    console.print(f"[green]✓ Added {ip} {hostname} to {domain}[/]")


def remove(domain: str, ip: str, hostname: str, options):
    with handle_errors():
        options.config().hosts_manager().remove_entry(domain, ip, hostname)
    console.print(f"[green]✓ Removed {ip} {hostname} from {domain}[/]")


def diff(domain: str, file: Path, options):
    """Preview the change ``apply`` would make."""
    content = read_input_file(file)
    with handle_errors():
        manager = options.config().hosts_manager()
        current = manager.read_raw(domain)
    print_diff(DiffGenerator().diff(manager.filename(domain).name, current, content))


def apply(domain: str, file: Path, options):
    content = read_input_file(file)
    with handle_errors():
        options.config().hosts_manager().write(domain, content)
    console.print(f"[green]✓ Saved host file {domain}[/]")
