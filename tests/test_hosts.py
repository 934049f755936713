"""Tests for hosts file handling."""

import pytest

from dnsadmin.core.coredns import HostsCodec, HostsManager
from dnsadmin.core.exceptions import (
    AlreadyExistsError,
    InvalidDomainError,
    NotFoundError,
    RecordNotFoundError,
    ValidationError,
)
from dnsadmin.core.models import HostEntry


class TestHostsCodec:
    """Tests for hosts parsing and line edits."""

    def test_parse(self, sample_hosts):
        entries = HostsCodec().parse(sample_hosts)

        assert entries == [
            HostEntry(ip="192.0.2.1", hostname="www.example.com"),
            HostEntry(ip="192.0.2.2", hostname="api.example.com"),
            HostEntry(ip="2001:db8::1", hostname="v6.example.com"),
        ]

    def test_parse_empty(self):
        assert HostsCodec().parse("") == []

    def test_default_content(self):
        assert HostsCodec().default_content("example.com") == "# Hosts entries for example.com\n"

    def test_add_entry(self):
        result = HostsCodec().add_entry("# header\n", "192.0.2.5", "db.example.com")

        assert result == "# header\n192.0.2.5\tdb.example.com\n"

    def test_add_entry_to_empty(self):
        assert HostsCodec().add_entry("", "::1", "localhost") == "::1\tlocalhost\n"

    def test_add_entry_missing_newline(self):
        result = HostsCodec().add_entry("192.0.2.1 a", "192.0.2.2", "b")

        assert result == "192.0.2.1 a\n192.0.2.2\tb\n"

    @pytest.mark.parametrize(
        "ip,hostname",
        [
            ("not-an-ip", "www.example.com"),
            ("300.1.1.1", "www.example.com"),
            ("192.0.2.1", ""),
            ("192.0.2.1", "two words"),
            ("192.0.2.1", "#comment"),
        ],
    )
    def test_add_entry_invalid(self, ip, hostname):
        with pytest.raises(ValidationError):
            HostsCodec().add_entry("", ip, hostname)

    def test_remove_entry_keeps_other_lines(self, sample_hosts):
        result = HostsCodec().remove_entry(sample_hosts, "192.0.2.2", "api.example.com")

        assert "api.example.com" not in result
        assert "# staging" in result
        assert "orphan" in result
        assert result.count("\n") == sample_hosts.count("\n") - 1

    def test_remove_entry_first_match_only(self):
        content = "192.0.2.1 a\n192.0.2.1 a\n"

        assert HostsCodec().remove_entry(content, "192.0.2.1", "a") == "192.0.2.1 a\n"

    def test_remove_entry_ignores_comments(self):
        with pytest.raises(RecordNotFoundError):
            HostsCodec().remove_entry("# 192.0.2.1 a\n", "192.0.2.1", "a")

    def test_remove_entry_missing(self, sample_hosts):
        with pytest.raises(RecordNotFoundError):
            HostsCodec().remove_entry(sample_hosts, "192.0.2.1", "api.example.com")


class TestHostsManager:
    """Tests for hosts file management on disk."""

    def test_filename(self, hosts_manager):
        assert hosts_manager.filename("example.com").name == "hosts.example.com"

    def test_list(self, hosts_manager):
        for name in ["hosts.example.com", "hosts.example.org", "db.example.com", "Corefile"]:
            (hosts_manager.directory / name).write_text("x\n")

        assert hosts_manager.list() == ["example.com", "example.org"]

    def test_list_legacy_names(self, tmp_path):
        for name in [
            "example.com",
            "example.org",
            "db.example.com",
            "hosts.example.com",
            "Corefile",
            ".hosts-abc123.tmp",
        ]:
            (tmp_path / name).write_text("x\n")

        manager = HostsManager(tmp_path, legacy_names=True)

        assert manager.list() == ["example.com", "example.org"]
        assert manager.filename("example.com") == tmp_path / "example.com"

    def test_read(self, hosts_manager, sample_hosts):
        (hosts_manager.directory / "hosts.example.com").write_text(sample_hosts)

        host_file = hosts_manager.read("example.com")

        assert host_file.domain == "example.com"
        assert host_file.raw == sample_hosts
        assert len(host_file.entries) == 3

    def test_read_missing(self, hosts_manager):
        with pytest.raises(NotFoundError):
            hosts_manager.read("example.com")

    def test_read_invalid_domain(self, hosts_manager):
        with pytest.raises(InvalidDomainError):
            hosts_manager.read("../etc/hosts")

    def test_create(self, hosts_manager):
        hosts_manager.create("example.com")

        assert hosts_manager.read_raw("example.com") == "# Hosts entries for example.com\n"
        with pytest.raises(AlreadyExistsError):
            hosts_manager.create("example.com")

    def test_write_normalizes(self, hosts_manager):
        hosts_manager.write("example.com", "192.0.2.1 a\r\n192.0.2.2 b")

        assert (hosts_manager.directory / "hosts.example.com").read_bytes() == (
            b"192.0.2.1 a\n192.0.2.2 b\n"
        )

    def test_add_entry_creates_file(self, hosts_manager):
        hosts_manager.add_entry("example.com", "192.0.2.1", "www.example.com")
        hosts_manager.add_entry("example.com", "192.0.2.2", "api.example.com")

        assert hosts_manager.read_raw("example.com") == (
            "192.0.2.1\twww.example.com\n192.0.2.2\tapi.example.com\n"
        )

    def test_add_invalid_entry_writes_nothing(self, hosts_manager):
        with pytest.raises(ValidationError):
            hosts_manager.add_entry("example.com", "bogus", "www.example.com")

        assert not hosts_manager.exists("example.com")

    def test_remove_entry(self, hosts_manager, sample_hosts):
        (hosts_manager.directory / "hosts.example.com").write_text(sample_hosts)

        hosts_manager.remove_entry("example.com", "192.0.2.1", "www.example.com")

        entries = hosts_manager.read("example.com").entries
        assert HostEntry(ip="192.0.2.1", hostname="www.example.com") not in entries
        assert len(entries) == 2

    def test_remove_missing_leaves_file(self, hosts_manager, sample_hosts):
        (hosts_manager.directory / "hosts.example.com").write_text(sample_hosts)

        with pytest.raises(RecordNotFoundError):
            hosts_manager.remove_entry("example.com", "192.0.2.9", "nope")

        assert hosts_manager.read_raw("example.com") == sample_hosts

    def test_delete(self, hosts_manager):
        hosts_manager.create("example.com")
        hosts_manager.delete("example.com")

        assert hosts_manager.list() == []
