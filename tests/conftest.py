"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from dnsadmin.core.coredns import CorefileManager, GSLBManager, HostsManager, ZoneManager

SAMPLE_ZONE = """$ORIGIN example.com.
$TTL 3600

@ IN SOA ns1.example.com. admin.example.com. (
    2024010100 ; serial
    3600       ; refresh
    900        ; retry
    604800     ; expire
    300        ; minimum TTL
)

@ IN NS ns1.example.com.
@ IN A 192.0.2.1
www 300 IN A 192.0.2.10
mail IN MX 10 mail.example.com.
mail IN A 192.0.2.20
ftp IN CNAME www.example.com.
@ IN TXT "v=spf1 -all"
"""

SAMPLE_HOSTS = """# Hosts entries for example.com
192.0.2.1\twww.example.com
192.0.2.2 api.example.com api

# staging
2001:db8::1\tv6.example.com
orphan
"""

SAMPLE_GSLB = """healthcheck_profiles:
  http_default:
    type: http
    params:
      port: 80
      uri: /
records:
  app.example.com.:
    mode: failover
    record_ttl: 30
    scrape_interval: 10s
    backends:
    - address: 192.0.2.10
      priority: 1
      healthchecks:
      - http_default
    - address: 192.0.2.11
      priority: 2
"""

SAMPLE_COREFILE = """.:53 {
    errors
    health
    hosts /etc/coredns/hosts.example.com {
        fallthrough
    }
    file /etc/coredns/db.example.com example.com
    forward . 8.8.8.8
    cache 30
}
"""


@pytest.fixture
def sample_zone() -> str:
    return SAMPLE_ZONE


@pytest.fixture
def sample_hosts() -> str:
    return SAMPLE_HOSTS


@pytest.fixture
def sample_gslb() -> str:
    return SAMPLE_GSLB


@pytest.fixture
def sample_corefile() -> str:
    return SAMPLE_COREFILE


@pytest.fixture
def zone_manager(tmp_path: Path) -> ZoneManager:
    """Zone manager over an empty directory."""
    return ZoneManager(tmp_path)


@pytest.fixture
def example_zone(zone_manager: ZoneManager, sample_zone: str) -> ZoneManager:
    """Zone manager with db.example.com already on disk."""
    (zone_manager.directory / "db.example.com").write_text(sample_zone)
    return zone_manager


@pytest.fixture
def hosts_manager(tmp_path: Path) -> HostsManager:
    return HostsManager(tmp_path)


@pytest.fixture
def gslb_manager(tmp_path: Path) -> GSLBManager:
    return GSLBManager(tmp_path)


@pytest.fixture
def example_gslb(gslb_manager: GSLBManager, sample_gslb: str) -> GSLBManager:
    """GSLB manager with db.example.com.yml already on disk."""
    (gslb_manager.directory / "db.example.com.yml").write_text(sample_gslb)
    return gslb_manager


@pytest.fixture
def corefile_manager(tmp_path: Path, sample_corefile: str) -> CorefileManager:
    path = tmp_path / "Corefile"
    path.write_text(sample_corefile)
    return CorefileManager(path)
