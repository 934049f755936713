"""GSLB configuration commands."""

from pathlib import Path
from typing import List, Optional

import pydantic
from rich.syntax import Syntax
from rich.table import Table

from dnsadmin.cli.commands.common import (
    confirm_or_abort,
    console,
    handle_errors,
    print_diff,
    read_input_file,
)
from dnsadmin.core.compare import DiffGenerator
from dnsadmin.core.coredns import sorted_record_names
from dnsadmin.core.exceptions import ValidationError
from dnsadmin.core.models import GSLBBackend, GSLBMode


def list_configs(options):
    """List GSLB configs with record and backend counts."""
    with handle_errors():
        entries = options.config().gslb_manager().list()

    if not entries:
        console.print("[yellow]No GSLB configs found[/]")
        return

    table = Table(title="GSLB Configs")
    table.add_column("Domain", style="cyan")
    table.add_column("Records", justify="right")
    table.add_column("Backends", justify="right")
    for entry in entries:
        table.add_row(entry.domain, str(entry.record_count), str(entry.backend_count))
    console.print(table)


def show(domain: str, options):
    """Show records and backends of a GSLB config."""
    with handle_errors():
        config = options.config().gslb_manager().read(domain)

    if not config.records:
        console.print(f"[yellow]No GSLB records in {domain}[/]")
        return

    for name in sorted_record_names(config.records):
        record = config.records[name]
        table = Table(
            title=f"{name} ({record.mode.value}, ttl {record.record_ttl}, "
            f"scrape {record.scrape_interval or '-'})"
        )
        table.add_column("#", justify="right")
        table.add_column("Address", style="green")
        table.add_column("Priority", justify="right")
        table.add_column("Weight", justify="right")
        table.add_column("Location")
        table.add_column("Status")
        for i, backend in enumerate(record.backends):
            status = "[red]disabled[/]" if backend.disabled else "[green]enabled[/]"
            table.add_row(
                str(i),
                backend.address,
                str(backend.priority),
                str(backend.weight),
                backend.location,
                status,
            )
        console.print(table)


def raw(domain: str, options):
    with handle_errors():
        content = options.config().gslb_manager().read_raw(domain)
    console.print(Syntax(content, "yaml", theme="monokai", line_numbers=True))


def create(domain: str, options):
    with handle_errors():
        options.config().gslb_manager().create(domain)
    console.print(f"[green]✓ Created GSLB config {domain}[/]")


def delete(domain: str, force: bool, options):
    confirm_or_abort(f"Delete GSLB config for {domain}?", force)
    with handle_errors():
        options.config().gslb_manager().delete(domain)
    console.print(f"[green]✓ Deleted GSLB config {domain}[/]")


def validate(file: Path, options):
    content = read_input_file(file)
    with handle_errors():
        options.config().gslb_manager().validate_raw(content)
    console.print("[green]✓ GSLB config is valid[/]")


def diff(domain: str, file: Path, options):
    """Preview the change ``apply`` would make."""
    content = read_input_file(file)
    with handle_errors():
        current = options.config().gslb_manager().read_raw(domain)
    print_diff(DiffGenerator().diff(f"db.{domain}.yml", current, content))


def apply(domain: str, file: Path, options):
    """Validate and save raw GSLB YAML."""
    content = read_input_file(file)
    with handle_errors():
        options.config().gslb_manager().write_raw(domain, content)
    console.print(f"[green]✓ Saved GSLB config {domain}[/]")


# ============================================================================
# Records
# ============================================================================


def add_record(
    domain: str, name: str, mode: GSLBMode, ttl: int, scrape_interval: str, options
):
    with handle_errors():
        options.config().gslb_manager().add_record(domain, name, mode, ttl, scrape_interval)
    console.print(f"[green]✓ Added GSLB record {name} ({mode.value}) to {domain}[/]")


def update_record(
    domain: str, name: str, mode: GSLBMode, ttl: int, scrape_interval: str, options
):
    with handle_errors():
        options.config().gslb_manager().update_record(domain, name, mode, ttl, scrape_interval)
    console.print(f"[green]✓ Updated GSLB record {name} in {domain}[/]")


def remove_record(domain: str, name: str, options):
    with handle_errors():
        options.config().gslb_manager().remove_record(domain, name)
    console.print(f"[green]✓ Removed GSLB record {name} from {domain}[/]")


# ============================================================================
# Backends
# ============================================================================


def add_backend(
    domain: str,
    name: str,
    address: str,
    priority: int,
    weight: int,
    location: str,
    disabled: bool,
    healthchecks: Optional[List[str]],
    options,
):
    with handle_errors():
        backend = _build_backend(address, priority, weight, location, disabled, healthchecks)
        options.config().gslb_manager().add_backend(domain, name, backend)
    console.print(f"[green]✓ Added backend {address} to {name} in {domain}[/]")


def remove_backend(domain: str, name: str, index: int, options):
    with handle_errors():
        options.config().gslb_manager().remove_backend(domain, name, index)
    console.print(f"[green]✓ Removed backend {index} from {name} in {domain}[/]")


def _build_backend(address, priority, weight, location, disabled, healthchecks) -> GSLBBackend:
    try:
        return GSLBBackend(
            address=address,
            priority=priority,
            weight=weight,
            location=location,
            disabled=disabled,
            healthchecks=list(healthchecks or []),
        )
    except pydantic.ValidationError as e:
        raise ValidationError(f"invalid backend: {e.errors()[0]['msg']}") from e
