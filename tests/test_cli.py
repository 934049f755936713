"""Tests for CLI commands."""

import pytest
from typer.testing import CliRunner

from dnsadmin import __version__
from dnsadmin.cli.main import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, sample_corefile):
    (tmp_path / "Corefile").write_text(sample_corefile)
    return tmp_path


@pytest.fixture
def env(workdir):
    """Environment pointing every artifact at the temp directory."""
    return {
        "COREFILE_PATH": str(workdir / "Corefile"),
        "ZONE_DIR": None,
        "HOSTS_DIR": None,
        "GSLB_DIR": None,
        "HOSTS_LEGACY_NAMES": None,
    }


def invoke(args, env, **kwargs):
    return runner.invoke(app, args, env=env, **kwargs)


class TestGlobalOptions:
    """Tests for configuration handling in the CLI."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_corefile_path(self, env):
        env["COREFILE_PATH"] = None

        result = invoke(["zones", "list"], env)

        assert result.exit_code == 1
        assert "COREFILE_PATH is required" in result.output

    def test_corefile_option_overrides_env(self, env, workdir):
        env["COREFILE_PATH"] = None
        zones = workdir / "zones"
        zones.mkdir()

        result = invoke(
            ["--corefile", str(workdir / "Corefile"), "--zone-dir", str(zones), "zones", "create", "example.com"],
            env,
        )

        assert result.exit_code == 0
        assert (zones / "db.example.com").is_file()

    def test_hosts_legacy_option(self, env, workdir):
        (workdir / "example.com").write_text("192.0.2.1 www\n")

        result = invoke(["--hosts-legacy", "hosts", "show", "example.com"], env)

        assert result.exit_code == 0
        assert "192.0.2.1" in result.output


class TestZoneCommands:
    """Tests for zone commands."""

    def test_create_and_list(self, env):
        assert invoke(["zones", "create", "example.com"], env).exit_code == 0

        result = invoke(["zones", "list"], env)

        assert result.exit_code == 0
        assert "example.com" in result.output

    def test_list_empty(self, env):
        result = invoke(["zones", "list"], env)

        assert result.exit_code == 0
        assert "No zone files found" in result.output

    def test_create_existing(self, env):
        invoke(["zones", "create", "example.com"], env)

        result = invoke(["zones", "create", "example.com"], env)

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_invalid_domain(self, env):
        result = invoke(["zones", "show", "../etc"], env)

        assert result.exit_code == 1
        assert "invalid path characters" in result.output

    def test_show(self, env, workdir, sample_zone):
        (workdir / "db.example.com").write_text(sample_zone)

        result = invoke(["zones", "show", "example.com"], env)

        assert result.exit_code == 0
        assert "2024010100" in result.output
        assert "192.0.2.10" in result.output

    def test_raw(self, env, workdir, sample_zone):
        (workdir / "db.example.com").write_text(sample_zone)

        result = invoke(["zones", "raw", "example.com"], env)

        assert result.exit_code == 0
        assert "v=spf1 -all" in result.output

    def test_add_and_remove_record(self, env, workdir):
        invoke(["zones", "create", "example.com"], env)

        result = invoke(
            ["zones", "add-record", "example.com", "www", "A", "192.0.2.5", "--ttl", "300"], env
        )
        assert result.exit_code == 0
        assert "www 300 IN A 192.0.2.5" in (workdir / "db.example.com").read_text()

        result = invoke(["zones", "remove-record", "example.com", "www", "A", "192.0.2.5"], env)
        assert result.exit_code == 0
        assert "192.0.2.5" not in (workdir / "db.example.com").read_text()

    def test_add_record_invalid_priority(self, env):
        invoke(["zones", "create", "example.com"], env)

        result = invoke(
            ["zones", "add-record", "example.com", "@", "MX", "mail", "--priority", "70000"], env
        )

        assert result.exit_code == 1
        assert "invalid record" in result.output

    def test_add_record_invalid_address(self, env, workdir):
        invoke(["zones", "create", "example.com"], env)
        before = (workdir / "db.example.com").read_text()

        result = invoke(["zones", "add-record", "example.com", "app", "A", "not-an-ip"], env)

        assert result.exit_code == 1
        assert "invalid A record" in result.output
        assert (workdir / "db.example.com").read_text() == before

    def test_remove_missing_record(self, env):
        invoke(["zones", "create", "example.com"], env)

        result = invoke(["zones", "remove-record", "example.com", "nope", "A", "192.0.2.9"], env)

        assert result.exit_code == 1
        assert "record not found" in result.output

    def test_diff(self, env, workdir, sample_zone):
        (workdir / "db.example.com").write_text(sample_zone)
        proposed = workdir / "proposed.zone"
        proposed.write_text(sample_zone + "api IN A 192.0.2.9\n")

        result = invoke(["zones", "diff", "example.com", str(proposed)], env)

        assert result.exit_code == 0
        assert "+api IN A 192.0.2.9" in result.output
        assert "--- a/db.example.com" in result.output

    def test_diff_identical(self, env, workdir, sample_zone):
        (workdir / "db.example.com").write_text(sample_zone)
        proposed = workdir / "proposed.zone"
        proposed.write_text(sample_zone)

        result = invoke(["zones", "diff", "example.com", str(proposed)], env)

        assert result.exit_code == 0
        assert "No differences" in result.output

    def test_apply(self, env, workdir, sample_zone):
        proposed = workdir / "proposed.zone"
        proposed.write_text(sample_zone)

        result = invoke(["zones", "apply", "example.com", str(proposed)], env)

        assert result.exit_code == 0
        assert "2024010100" not in (workdir / "db.example.com").read_text()

    def test_validate_rejects_missing_soa(self, env, workdir):
        proposed = workdir / "proposed.zone"
        proposed.write_text("$TTL 300\nwww IN A 192.0.2.1\n")

        result = invoke(["zones", "validate", "example.com", str(proposed)], env)

        assert result.exit_code == 1
        assert "SOA" in result.output

    def test_missing_input_file(self, env, workdir):
        result = invoke(["zones", "validate", "example.com", str(workdir / "nope")], env)

        assert result.exit_code == 1
        assert "Cannot read" in result.output

    def test_delete_requires_confirmation(self, env, workdir):
        invoke(["zones", "create", "example.com"], env)

        result = invoke(["zones", "delete", "example.com"], env, input="n\n")

        assert result.exit_code == 1
        assert (workdir / "db.example.com").exists()

    def test_delete_force(self, env, workdir):
        invoke(["zones", "create", "example.com"], env)

        result = invoke(["zones", "delete", "example.com", "--force"], env)

        assert result.exit_code == 0
        assert not (workdir / "db.example.com").exists()


class TestHostsCommands:
    """Tests for hosts commands."""

    def test_add_show_remove(self, env, workdir):
        result = invoke(["hosts", "add", "example.com", "192.0.2.1", "www.example.com"], env)
        assert result.exit_code == 0
        assert (workdir / "hosts.example.com").read_text() == "192.0.2.1\twww.example.com\n"

        result = invoke(["hosts", "show", "example.com"], env)
        assert result.exit_code == 0
        assert "www.example.com" in result.output

        result = invoke(["hosts", "remove", "example.com", "192.0.2.1", "www.example.com"], env)
        assert result.exit_code == 0
        assert (workdir / "hosts.example.com").read_text() == "\n"

    def test_add_invalid_ip(self, env):
        result = invoke(["hosts", "add", "example.com", "999.1.1.1", "www"], env)

        assert result.exit_code == 1
        assert "invalid IP address" in result.output

    def test_remove_missing(self, env):
        invoke(["hosts", "create", "example.com"], env)

        result = invoke(["hosts", "remove", "example.com", "192.0.2.1", "nope"], env)

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list(self, env):
        invoke(["hosts", "create", "example.com"], env)

        result = invoke(["hosts", "list"], env)

        assert result.exit_code == 0
        assert "hosts.example.com" in result.output

    def test_apply_and_diff(self, env, workdir, sample_hosts):
        invoke(["hosts", "create", "example.com"], env)
        proposed = workdir / "proposed.hosts"
        proposed.write_text(sample_hosts)

        result = invoke(["hosts", "diff", "example.com", str(proposed)], env)
        assert result.exit_code == 0
        assert "+192.0.2.2 api.example.com api" in result.output

        result = invoke(["hosts", "apply", "example.com", str(proposed)], env)
        assert result.exit_code == 0
        assert (workdir / "hosts.example.com").read_text() == sample_hosts


class TestGSLBCommands:
    """Tests for GSLB commands."""

    def test_create_and_show(self, env):
        assert invoke(["gslb", "create", "example.com"], env).exit_code == 0

        result = invoke(["gslb", "show", "example.com"], env)

        assert result.exit_code == 0
        assert "192.168.1.10" in result.output

    def test_list(self, env, workdir, sample_gslb):
        (workdir / "db.example.com.yml").write_text(sample_gslb)

        result = invoke(["gslb", "list"], env)

        assert result.exit_code == 0
        assert "example.com" in result.output

    def test_record_and_backend_lifecycle(self, env):
        invoke(["gslb", "create", "example.com"], env)

        result = invoke(
            ["gslb", "add-record", "example.com", "api.example.com.", "--mode", "roundrobin"], env
        )
        assert result.exit_code == 0

        result = invoke(
            [
                "gslb",
                "add-backend",
                "example.com",
                "api.example.com.",
                "192.0.2.50",
                "--weight",
                "10",
                "--healthcheck",
                "http_default",
            ],
            env,
        )
        assert result.exit_code == 0

        result = invoke(
            ["gslb", "update-record", "example.com", "api.example.com.", "--mode", "weighted"], env
        )
        assert result.exit_code == 0

        result = invoke(["gslb", "raw", "example.com"], env)
        assert "192.0.2.50" in result.output
        assert "weighted" in result.output

        result = invoke(["gslb", "remove-backend", "example.com", "api.example.com.", "0"], env)
        assert result.exit_code == 0

        result = invoke(["gslb", "remove-record", "example.com", "api.example.com."], env)
        assert result.exit_code == 0

    def test_add_duplicate_record(self, env):
        invoke(["gslb", "create", "example.com"], env)

        result = invoke(["gslb", "add-record", "example.com", "app.example.com."], env)

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_remove_backend_out_of_range(self, env):
        invoke(["gslb", "create", "example.com"], env)

        result = invoke(["gslb", "remove-backend", "example.com", "app.example.com.", "5"], env)

        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_validate(self, env, workdir, sample_gslb):
        good = workdir / "good.yml"
        good.write_text(sample_gslb)
        bad = workdir / "bad.yml"
        bad.write_text(sample_gslb.replace("failover", "bogus"))

        assert invoke(["gslb", "validate", str(good)], env).exit_code == 0

        result = invoke(["gslb", "validate", str(bad)], env)
        assert result.exit_code == 1
        assert "invalid mode" in result.output

    def test_apply(self, env, workdir, sample_gslb):
        proposed = workdir / "proposed.yml"
        proposed.write_text(sample_gslb)

        result = invoke(["gslb", "apply", "example.com", str(proposed)], env)

        assert result.exit_code == 0
        assert (workdir / "db.example.com.yml").read_text() == sample_gslb


class TestCorefileCommands:
    """Tests for Corefile commands."""

    def test_show(self, env):
        result = invoke(["corefile", "show"], env)

        assert result.exit_code == 0
        assert "forward . 8.8.8.8" in result.output

    def test_validate_unbalanced(self, env, workdir):
        proposed = workdir / "Corefile.new"
        proposed.write_text(".:53 {\n    whoami\n")

        result = invoke(["corefile", "validate", str(proposed)], env)

        assert result.exit_code == 1
        assert "unbalanced braces" in result.output

    def test_diff_and_apply(self, env, workdir, sample_corefile):
        proposed = workdir / "Corefile.new"
        proposed.write_text(sample_corefile.replace("cache 30", "cache 60"))

        result = invoke(["corefile", "diff", str(proposed)], env)
        assert result.exit_code == 0
        assert "-    cache 30" in result.output
        assert "+    cache 60" in result.output

        result = invoke(["corefile", "apply", str(proposed)], env)
        assert result.exit_code == 0
        assert "cache 60" in (workdir / "Corefile").read_text()

    def test_apply_rejects_invalid(self, env, workdir, sample_corefile):
        proposed = workdir / "Corefile.new"
        proposed.write_text("}\n")

        result = invoke(["corefile", "apply", str(proposed)], env)

        assert result.exit_code == 1
        assert (workdir / "Corefile").read_text() == sample_corefile
