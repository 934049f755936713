"""Hosts-format files for the CoreDNS ``hosts`` plugin."""

import ipaddress
import logging
from pathlib import Path

from dnsadmin.core.base import BaseConfigCodec, BaseFileManager
from dnsadmin.core.exceptions import NotFoundError, RecordNotFoundError, ValidationError
from dnsadmin.core.models import HostEntry, HostFile
from dnsadmin.core.storage import is_valid_domain, validate_domain

logger = logging.getLogger(__name__)

HOSTS_PREFIX = "hosts."

LEGACY_EXCLUDED_PREFIXES = (HOSTS_PREFIX, "db.")
LEGACY_EXCLUDED_NAMES = {"Corefile"}


class HostsCodec(BaseConfigCodec):
    """Line-oriented parsing and editing of ``<ip> <hostname>`` files."""

    def parse(self, content: str) -> list[HostEntry]:
        """
        Extract ``(ip, hostname)`` pairs.

        Blank lines, ``#`` comments and lines with fewer than two fields are
        skipped. Only the first two fields of a line are used.
        """
        entries = []
        for line in content.split("\n"):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.split()
            if len(fields) < 2:
                logger.debug(f"Skipping hosts line without hostname: {line!r}")
                continue
            entries.append(HostEntry(ip=fields[0], hostname=fields[1]))
        return entries

    def default_content(self, domain: str) -> str:
        return f"# Hosts entries for {domain}\n"

    def validate_entry(self, ip: str, hostname: str) -> None:
        """
        Raises:
            ValidationError: If ``ip`` is not an IP address or ``hostname``
                is not a single token
        """
        try:
            ipaddress.ip_address(ip)
        except ValueError as e:
            raise ValidationError(f"invalid IP address: {ip!r}") from e
        if not hostname or len(hostname.split()) != 1 or hostname.startswith("#"):
            raise ValidationError(f"invalid hostname: {hostname!r}")

    def add_entry(self, content: str, ip: str, hostname: str) -> str:
        """Append ``<ip>\\t<hostname>``; all other lines are kept verbatim."""
        self.validate_entry(ip, hostname)
        line = f"{ip}\t{hostname}"
        if not content:
            return line + "\n"
        if not content.endswith("\n"):
            content += "\n"
        return content + line + "\n"

    def remove_entry(self, content: str, ip: str, hostname: str) -> str:
        """
        Remove the first line whose first two fields are ``ip`` and ``hostname``.

        Raises:
            RecordNotFoundError: If no such line exists
        """
        lines = content.split("\n")
        for i, line in enumerate(lines):
            trimmed = line.strip()
            if not trimmed or trimmed.startswith("#"):
                continue
            fields = trimmed.split()
            if len(fields) >= 2 and fields[0] == ip and fields[1] == hostname:
                del lines[i]
                return "\n".join(lines)

        raise RecordNotFoundError(f"host entry not found: {ip} {hostname}")


class HostsManager(BaseFileManager):
    """
    Manage per-domain hosts files.

    Files are named ``hosts.<domain>``; with ``legacy_names`` the bare
    domain is used as the filename instead.
    """

    artifact = "host file"
    prefix = HOSTS_PREFIX
    temp_prefix = ".hosts-"

    def __init__(
        self,
        directory: str | Path,
        legacy_names: bool = False,
        codec: HostsCodec | None = None,
    ):
        super().__init__(directory)
        self.legacy_names = legacy_names
        if legacy_names:
            self.prefix = ""
        self._codec = codec or HostsCodec()

    @property
    def codec(self) -> HostsCodec:
        return self._codec

    def _accepts(self, domain: str) -> bool:
        if self.legacy_names:
            # Bare filenames: skip temp files, zone files, the Corefile and non-domains
            return (
                is_valid_domain(domain)
                and not domain.startswith(LEGACY_EXCLUDED_PREFIXES)
                and domain not in LEGACY_EXCLUDED_NAMES
            )
        return True

    def read(self, domain: str) -> HostFile:
        validate_domain(domain)
        with self.lock.read_locked():
            raw = self._read_text(domain)
        return HostFile(domain=domain, entries=self.codec.parse(raw), raw=raw)

    def write(self, domain: str, content: str) -> None:
        validate_domain(domain)
        with self.lock.write_locked():
            self._write_text(domain, content)
        logger.info(f"Wrote host file {domain}")

    def add_entry(self, domain: str, ip: str, hostname: str) -> None:
        """Append an entry, creating the file if it does not exist yet."""
        validate_domain(domain)
        with self.lock.write_locked():
            try:
                content = self._read_text(domain)
            except NotFoundError:
                content = ""
            self._write_text(domain, self.codec.add_entry(content, ip, hostname))
        logger.info(f"Added host entry {ip} {hostname} to {domain}")

    def remove_entry(self, domain: str, ip: str, hostname: str) -> None:
        """
        Raises:
            RecordNotFoundError: If no line matches; the file is untouched
        """
        validate_domain(domain)
        with self.lock.write_locked():
            content = self._read_text(domain)
            self._write_text(domain, self.codec.remove_entry(content, ip, hostname))
        logger.info(f"Removed host entry {ip} {hostname} from {domain}")
