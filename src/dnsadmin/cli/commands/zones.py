"""Zone file commands."""

from pathlib import Path

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
from dnsadmin.core.exceptions import ValidationError
from dnsadmin.core.models import Record, RecordType


def list_zones(options):
    """List zone files with their editable record counts."""
    with handle_errors():
        counts = options.config().zone_manager().record_counts()

    if not counts:
        console.print("[yellow]No zone files found[/]")
        return

    table = Table(title="DNS Zones")
    table.add_column("Domain", style="cyan")
    table.add_column("Records", justify="right")
    for domain, count in counts.items():
        table.add_row(domain, str(count))
    console.print(table)


def show(domain: str, options):
    """Show SOA and records of a zone."""
    with handle_errors():
        zone = options.config().zone_manager().read(domain)

    if zone.soa:
        soa = Table(title=f"{domain} SOA", show_header=False)
        soa.add_column("Field", style="cyan")
        soa.add_column("Value")
        soa.add_row("Primary", zone.soa.primary_server)
        soa.add_row("Admin", zone.soa.admin_mailbox)
        soa.add_row("Serial", str(zone.soa.serial))
        soa.add_row("Refresh", str(zone.soa.refresh))
        soa.add_row("Retry", str(zone.soa.retry))
        soa.add_row("Expire", str(zone.soa.expire))
        soa.add_row("Min TTL", str(zone.soa.min_ttl))
        console.print(soa)
    else:
        console.print("[yellow]Zone has no SOA record[/]")

    table = Table(title=f"{domain} Records")
    table.add_column("Name", style="cyan")
    table.add_column("TTL", justify="right")
    table.add_column("Type", style="magenta")
    table.add_column("Value", style="green")
    for record in zone.records:
        value = record.value
        if record.record_type == RecordType.MX:
            value = f"{record.priority} {value}"
        table.add_row(record.name, str(record.ttl), record.record_type.value, value)
    console.print(table)


def raw(domain: str, options):
    """Print the zone file text."""
    with handle_errors():
        content = options.config().zone_manager().read_raw(domain)
    console.print(Syntax(content, "text", theme="monokai", line_numbers=True))


def create(domain: str, options):
    with handle_errors():
        options.config().zone_manager().create(domain)
    console.print(f"[green]✓ Created zone {domain}[/]")


def delete(domain: str, force: bool, options):
    confirm_or_abort(f"Delete zone file for {domain}?", force)
    with handle_errors():
        options.config().zone_manager().delete(domain)
    console.print(f"[green]✓ Deleted zone {domain}[/]")


def validate(domain: str, file: Path, options):
    """Validate a zone file on disk without saving it."""
    content = read_input_file(file)
    with handle_errors():
        options.config().zone_manager().validate(domain, content)
    console.print("[green]✓ Zone file is valid[/]")


def diff(domain: str, file: Path, options):
    """Preview the change ``apply`` would make."""
    content = read_input_file(file)
    with handle_errors():
        current = options.config().zone_manager().read_raw(domain)
    print_diff(DiffGenerator().diff(f"db.{domain}", current, content))


def apply(domain: str, file: Path, options):
    """Validate and save a zone file, bumping the serial."""
    content = read_input_file(file)
    with handle_errors():
        manager = options.config().zone_manager()
        manager.write(domain, content)
        soa = manager.read(domain).soa
    serial = f" (serial {soa.serial})" if soa else ""
    console.print(f"[green]✓ Saved zone {domain}{serial}[/]")


def add_record(
    domain: str,
    name: str,
    record_type: RecordType,
    value: str,
    ttl: int,
    priority: int,
    options,
):
    with handle_errors():
        record = _build_record(name, record_type, value, ttl, priority)
        options.config().zone_manager().add_record(domain, record)
    console.print(f"[green]✓ Added {record_type.value} record {name} to {domain}[/]")


def remove_record(domain: str, name: str, record_type: RecordType, value: str, options):
    with handle_errors():
        options.config().zone_manager().remove_record(domain, name, record_type, value)
    console.print(f"[green]✓ Removed {record_type.value} record {name} from {domain}[/]")


def _build_record(name, record_type, value, ttl, priority) -> Record:
    try:
        return Record(name=name, record_type=record_type, ttl=ttl, value=value, priority=priority)
    except pydantic.ValidationError as e:
        raise ValidationError(f"invalid record: {e.errors()[0]['msg']}") from e
