"""dnsadmin - safe editing of CoreDNS zone, hosts, GSLB and Corefile artifacts."""

__version__ = "0.1.0"
