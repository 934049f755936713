"""Codecs and managers for CoreDNS configuration artifacts."""

from dnsadmin.core.coredns.corefile import CorefileManager
from dnsadmin.core.coredns.gslb import GSLBCodec, GSLBManager, sorted_record_names
from dnsadmin.core.coredns.hosts import HostsCodec, HostsManager
from dnsadmin.core.coredns.zone import ZoneCodec, ZoneManager, fqdn, relative_name

__all__ = [
    "CorefileManager",
    "GSLBCodec",
    "GSLBManager",
    "HostsCodec",
    "HostsManager",
    "ZoneCodec",
    "ZoneManager",
    "fqdn",
    "relative_name",
    "sorted_record_names",
]
