"""Main CLI entry point for dnsadmin."""

import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from dnsadmin.core.config import ManagerConfig
from dnsadmin.core.models import GSLBMode, RecordType

# Create the main app
app = typer.Typer(
    name="dnsadmin",
    help="DNS Admin - manage CoreDNS zone, hosts, GSLB and Corefile configuration",
    no_args_is_help=True,
)

console = Console()


# Global options stored in context
class GlobalOptions:
    def __init__(self):
        self.corefile: Optional[Path] = None
        self.zone_dir: Optional[Path] = None
        self.hosts_dir: Optional[Path] = None
        self.gslb_dir: Optional[Path] = None
        self.hosts_legacy: bool = False
        self.verbose: bool = False
        self.debug: bool = False

    def config(self) -> ManagerConfig:
        """Environment configuration with command-line overrides applied."""
        env = dict(os.environ)
        overrides = {
            "COREFILE_PATH": self.corefile,
            "ZONE_DIR": self.zone_dir,
            "HOSTS_DIR": self.hosts_dir,
            "GSLB_DIR": self.gslb_dir,
        }
        for key, value in overrides.items():
            if value is not None:
                env[key] = str(value)
        if self.hosts_legacy:
            env["HOSTS_LEGACY_NAMES"] = "true"
        return ManagerConfig.from_env(env)


def setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=debug)],
    )


# ============================================================================
# Zone Commands
# ============================================================================

zones_app = typer.Typer(help="Zone file commands")
app.add_typer(zones_app, name="zones")


@zones_app.command("list")
def zones_list(ctx: typer.Context):
    """List zone files."""
    from dnsadmin.cli.commands.zones import list_zones

    list_zones(ctx.obj)


@zones_app.command("show")
def zones_show(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
):
    """Show SOA and records of a zone."""
    from dnsadmin.cli.commands.zones import show

    show(domain, ctx.obj)


@zones_app.command("raw")
def zones_raw(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
):
    """Print the zone file text."""
    from dnsadmin.cli.commands.zones import raw

    raw(domain, ctx.obj)


@zones_app.command("create")
def zones_create(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
):
    """Create a zone file from the default template."""
    from dnsadmin.cli.commands.zones import create

    create(domain, ctx.obj)


@zones_app.command("delete")
def zones_delete(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a zone file."""
    from dnsadmin.cli.commands.zones import delete

    delete(domain, force, ctx.obj)


@zones_app.command("validate")
def zones_validate(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
    file: Path = typer.Argument(..., help="Zone file to check"),
):
    """Validate zone file content."""
    from dnsadmin.cli.commands.zones import validate

    validate(domain, file, ctx.obj)


@zones_app.command("diff")
def zones_diff(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
    file: Path = typer.Argument(..., help="Proposed zone file"),
):
    """Diff the stored zone file against a proposed one."""
    from dnsadmin.cli.commands.zones import diff

    diff(domain, file, ctx.obj)


@zones_app.command("apply")
def zones_apply(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
    file: Path = typer.Argument(..., help="Zone file to save"),
):
    """Validate and save a zone file."""
    from dnsadmin.cli.commands.zones import apply

    apply(domain, file, ctx.obj)


@zones_app.command("add-record")
def zones_add_record(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
    name: str = typer.Argument(..., help='Relative record name, "@" for the apex'),
    record_type: RecordType = typer.Argument(..., help="Record type"),
    value: str = typer.Argument(..., help="Record value"),
    ttl: int = typer.Option(0, "--ttl", help="TTL, 0 inherits $TTL"),
    priority: int = typer.Option(0, "--priority", "-p", help="MX preference"),
):
    """Append a record to a zone."""
    from dnsadmin.cli.commands.zones import add_record

    add_record(domain, name, record_type, value, ttl, priority, ctx.obj)


@zones_app.command("remove-record")
def zones_remove_record(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Zone domain"),
    name: str = typer.Argument(..., help="Relative record name"),
    record_type: RecordType = typer.Argument(..., help="Record type"),
    value: str = typer.Argument(..., help="Record value"),
):
    """Remove the first matching record from a zone."""
    from dnsadmin.cli.commands.zones import remove_record

    remove_record(domain, name, record_type, value, ctx.obj)


# ============================================================================
# Hosts Commands
# ============================================================================

hosts_app = typer.Typer(help="Hosts file commands")
app.add_typer(hosts_app, name="hosts")


@hosts_app.command("list")
def hosts_list(ctx: typer.Context):
    """List host files."""
    from dnsadmin.cli.commands.hosts import list_hosts

    list_hosts(ctx.obj)


@hosts_app.command("show")
def hosts_show(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
):
    """Show the entries of a host file."""
    from dnsadmin.cli.commands.hosts import show

    show(domain, ctx.obj)


@hosts_app.command("create")
def hosts_create(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
):
    """Create an empty host file."""
    from dnsadmin.cli.commands.hosts import create

    create(domain, ctx.obj)


@hosts_app.command("delete")
def hosts_delete(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a host file."""
    from dnsadmin.cli.commands.hosts import delete

    delete(domain, force, ctx.obj)


@hosts_app.command("add")
def hosts_add(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
    ip: str = typer.Argument(..., help="IPv4 or IPv6 address"),
    hostname: str = typer.Argument(..., help="Hostname"),
):
    """Append an entry, creating the file if needed."""
    from dnsadmin.cli.commands.hosts import add

    add(domain, ip, hostname, ctx.obj)


@hosts_app.command("remove")
def hosts_remove(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
    ip: str = typer.Argument(..., help="IP address"),
    hostname: str = typer.Argument(..., help="Hostname"),
):
    """Remove the first matching entry."""
    from dnsadmin.cli.commands.hosts import remove

    remove(domain, ip, hostname, ctx.obj)


@hosts_app.command("diff")
def hosts_diff(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
    file: Path = typer.Argument(..., help="Proposed host file"),
):
    """Diff the stored host file against a proposed one."""
    from dnsadmin.cli.commands.hosts import diff

    diff(domain, file, ctx.obj)


@hosts_app.command("apply")
def hosts_apply(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Hosts domain"),
    file: Path = typer.Argument(..., help="Host file to save"),
):
    """Save a host file."""
    from dnsadmin.cli.commands.hosts import apply

    apply(domain, file, ctx.obj)


# ============================================================================
# GSLB Commands
# ============================================================================

gslb_app = typer.Typer(help="GSLB configuration commands")
app.add_typer(gslb_app, name="gslb")


@gslb_app.command("list")
def gslb_list(ctx: typer.Context):
    """List GSLB configs."""
    from dnsadmin.cli.commands.gslb import list_configs

    list_configs(ctx.obj)


@gslb_app.command("show")
def gslb_show(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
):
    """Show records and backends."""
    from dnsadmin.cli.commands.gslb import show

    show(domain, ctx.obj)


@gslb_app.command("raw")
def gslb_raw(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
):
    """Print the GSLB YAML."""
    from dnsadmin.cli.commands.gslb import raw

    raw(domain, ctx.obj)


@gslb_app.command("create")
def gslb_create(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
):
    """Create a GSLB config from the default template."""
    from dnsadmin.cli.commands.gslb import create

    create(domain, ctx.obj)


@gslb_app.command("delete")
def gslb_delete(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a GSLB config."""
    from dnsadmin.cli.commands.gslb import delete

    delete(domain, force, ctx.obj)


@gslb_app.command("validate")
def gslb_validate(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="GSLB YAML to check"),
):
    """Validate raw GSLB YAML."""
    from dnsadmin.cli.commands.gslb import validate

    validate(file, ctx.obj)


@gslb_app.command("diff")
def gslb_diff(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    file: Path = typer.Argument(..., help="Proposed GSLB YAML"),
):
    """Diff the stored GSLB config against a proposed one."""
    from dnsadmin.cli.commands.gslb import diff

    diff(domain, file, ctx.obj)


@gslb_app.command("apply")
def gslb_apply(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    file: Path = typer.Argument(..., help="GSLB YAML to save"),
):
    """Validate and save raw GSLB YAML."""
    from dnsadmin.cli.commands.gslb import apply

    apply(domain, file, ctx.obj)


@gslb_app.command("add-record")
def gslb_add_record(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    name: str = typer.Argument(..., help="Record name, e.g. app.example.com."),
    mode: GSLBMode = typer.Option(GSLBMode.FAILOVER, "--mode", "-m", help="Selection mode"),
    ttl: int = typer.Option(30, "--ttl", help="Record TTL"),
    scrape_interval: str = typer.Option("10s", "--scrape-interval", help="Health check interval"),
):
    """Add a record without backends."""
    from dnsadmin.cli.commands.gslb import add_record

    add_record(domain, name, mode, ttl, scrape_interval, ctx.obj)


@gslb_app.command("update-record")
def gslb_update_record(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    name: str = typer.Argument(..., help="Record name"),
    mode: GSLBMode = typer.Option(..., "--mode", "-m", help="Selection mode"),
    ttl: int = typer.Option(30, "--ttl", help="Record TTL"),
    scrape_interval: str = typer.Option("10s", "--scrape-interval", help="Health check interval"),
):
    """Change a record's mode, TTL and scrape interval."""
    from dnsadmin.cli.commands.gslb import update_record

    update_record(domain, name, mode, ttl, scrape_interval, ctx.obj)


@gslb_app.command("remove-record")
def gslb_remove_record(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    name: str = typer.Argument(..., help="Record name"),
):
    """Remove a record and its backends."""
    from dnsadmin.cli.commands.gslb import remove_record

    remove_record(domain, name, ctx.obj)


@gslb_app.command("add-backend")
def gslb_add_backend(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    name: str = typer.Argument(..., help="Record name"),
    address: str = typer.Argument(..., help="Backend address"),
    priority: int = typer.Option(0, "--priority", "-p"),
    weight: int = typer.Option(0, "--weight", "-w"),
    location: str = typer.Option("", "--location", "-l"),
    disabled: bool = typer.Option(False, "--disabled", help="Add the backend disabled"),
    healthcheck: Optional[List[str]] = typer.Option(
        None, "--healthcheck", help="Health check profile name (repeatable)"
    ),
):
    """Append a backend to a record."""
    from dnsadmin.cli.commands.gslb import add_backend

    add_backend(domain, name, address, priority, weight, location, disabled, healthcheck, ctx.obj)


@gslb_app.command("remove-backend")
def gslb_remove_backend(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="GSLB domain"),
    name: str = typer.Argument(..., help="Record name"),
    index: int = typer.Argument(..., help="Backend position, starting at 0"),
):
    """Remove a backend by position."""
    from dnsadmin.cli.commands.gslb import remove_backend

    remove_backend(domain, name, index, ctx.obj)


# ============================================================================
# Corefile Commands
# ============================================================================

corefile_app = typer.Typer(help="Corefile commands")
app.add_typer(corefile_app, name="corefile")


@corefile_app.command("show")
def corefile_show(ctx: typer.Context):
    """Print the Corefile."""
    from dnsadmin.cli.commands.corefile import show

    show(ctx.obj)


@corefile_app.command("validate")
def corefile_validate(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Corefile to check"),
):
    """Check brace balance of a Corefile."""
    from dnsadmin.cli.commands.corefile import validate

    validate(file, ctx.obj)


@corefile_app.command("diff")
def corefile_diff(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Proposed Corefile"),
):
    """Diff the Corefile against a proposed one."""
    from dnsadmin.cli.commands.corefile import diff

    diff(file, ctx.obj)


@corefile_app.command("apply")
def corefile_apply(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Corefile to save"),
):
    """Validate and save the Corefile."""
    from dnsadmin.cli.commands.corefile import apply

    apply(file, ctx.obj)


# ============================================================================
# Version Command
# ============================================================================


@app.command("version")
def version():
    """Show version information."""
    from dnsadmin import __version__

    console.print(f"dnsadmin version {__version__}")


# ============================================================================
# Main Callback (Global Options)
# ============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    corefile: Optional[Path] = typer.Option(
        None, "--corefile", help="Corefile path (overrides COREFILE_PATH)"
    ),
    zone_dir: Optional[Path] = typer.Option(
        None, "--zone-dir", help="Zone file directory (overrides ZONE_DIR)"
    ),
    hosts_dir: Optional[Path] = typer.Option(
        None, "--hosts-dir", help="Host file directory (overrides HOSTS_DIR)"
    ),
    gslb_dir: Optional[Path] = typer.Option(
        None, "--gslb-dir", help="GSLB config directory (overrides GSLB_DIR)"
    ),
    hosts_legacy: bool = typer.Option(
        False, "--hosts-legacy", help="Host files are named by bare domain"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
):
    """DNS Admin - CoreDNS configuration management."""
    ctx.ensure_object(GlobalOptions)
    ctx.obj.corefile = corefile
    ctx.obj.zone_dir = zone_dir
    ctx.obj.hosts_dir = hosts_dir
    ctx.obj.gslb_dir = gslb_dir
    ctx.obj.hosts_legacy = hosts_legacy
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    setup_logging(verbose, debug)


if __name__ == "__main__":
    app()
