"""BIND zone file parsing, formatting and management."""

import logging
import re
from datetime import date
from pathlib import Path

import dns.exception
import dns.name
import dns.rdataclass
import dns.rdatatype
import dns.tokenizer
import dns.transaction
import dns.zonefile

from dnsadmin.core.base import BaseConfigCodec, BaseFileManager
from dnsadmin.core.exceptions import ParseError, RecordNotFoundError, ValidationError
from dnsadmin.core.models import Record, RecordType, SOAData, ZoneFile
from dnsadmin.core.storage import normalize_content, validate_domain

logger = logging.getLogger(__name__)

ZONE_PREFIX = "db."
GSLB_SUFFIX = ".yml"

# Default TTL used when a single line is parsed out of context
FRAGMENT_TTL = 3600

SERIAL_WITH_COMMENT = re.compile(r"(\s+)(\d{10})(\s*;\s*serial)")
SERIAL_PLAIN = re.compile(r"(\s+)(\d{10})(\s)")

DEFAULT_ZONE_TEMPLATE = """$ORIGIN {origin}
$TTL 3600

@ IN SOA ns1.{origin} admin.{origin} (
    {serial} ; serial
    3600       ; refresh
    900        ; retry
    604800     ; expire
    300        ; minimum TTL
)

@ IN NS ns1.{origin}
"""

# Record types whose value is a domain name and may be given without the dot
NAME_VALUED_TYPES = {RecordType.CNAME, RecordType.MX, RecordType.NS}


def fqdn(name: str) -> str:
    """Append the root dot if missing."""
    return name if name.endswith(".") else name + "."


def relative_name(name: str, origin: str) -> str:
    """
    Convert an owner name to one relative to ``origin``.

    ``example.com.`` with origin ``example.com.`` gives ``"@"``,
    ``app.example.com.`` gives ``"app"``; names outside the origin are
    returned fully qualified.
    """
    name = fqdn(name)
    origin = fqdn(origin)

    if name == origin:
        return "@"
    if name.endswith("." + origin):
        return name[: -len(origin) - 1]
    return name


def serial_for(today: date, sequence: int = 1) -> str:
    """Render a ``YYYYMMDDNN`` serial."""
    return f"{today.strftime('%Y%m%d')}{sequence:02d}"


# ============================================================================
# Record stream reading
# ============================================================================


class _RecordCollector(dns.transaction.TransactionManager):
    """
    Collects records from dnspython's zone file reader one line at a time.

    A ``dns.zone.Zone`` merges records into rdatasets, which reorders them
    and collapses their TTLs. Here every record is kept as written. The
    manager is rooted so the reader also keeps owner names outside the
    zone origin.
    """

    def __init__(self):
        self.records: list[tuple[str, int, object]] = []

    def writer(self, replacement=False):
        return _CollectingTransaction(self, replacement)

    def origin_information(self):
        return dns.name.root, False, dns.name.root

    def get_class(self):
        return dns.rdataclass.IN


class _CollectingTransaction(dns.transaction.Transaction):
    def add(self, *args):
        name, ttl, rdata = args
        self.manager.records.append((name.to_text(), ttl, rdata))

    def _set_origin(self, origin):
        pass


def read_records(content: str, origin: str) -> list[tuple[str, int, object]]:
    """
    Read zone text into ``(owner, ttl, rdata)`` tuples in file order.

    Raises:
        ParseError: If the text is not valid zone file syntax
    """
    collector = _RecordCollector()
    tok = dns.tokenizer.Tokenizer(f"$ORIGIN {fqdn(origin)}\n{content}")
    # The injected $ORIGIN line is line 0 so errors point at the caller's lines
    tok.line_number = 0
    reader = dns.zonefile.Reader(tok, dns.rdataclass.IN, collector.writer())
    try:
        reader.read()
    except (dns.exception.DNSException, KeyError, ValueError) as e:
        raise ParseError(f"zone parse error: {e}") from e
    return collector.records


class ZoneCodec(BaseConfigCodec):
    """
    Pure functions over zone file text.

    Parsing uses dnspython's master file reader, so ``$ORIGIN``, ``$TTL``,
    ``;`` comments and parenthesised multi-line records behave as in BIND.
    Mutations are line edits on the raw text; the parsed form is only ever
    a view.
    """

    # ========================================================================
    # Parsing
    # ========================================================================

    def parse(self, content: str, origin: str) -> tuple[list[Record], SOAData | None]:
        """
        Parse zone text into editable records and the SOA.

        Apex NS records are left out: they are required by the zone and
        managed by the system, not edited as records.

        Raises:
            ParseError: If the text is not a valid zone file
        """
        records: list[Record] = []
        soa: SOAData | None = None

        for owner, ttl, rdata in read_records(content, origin):
            name = relative_name(owner, origin)

            if rdata.rdtype == dns.rdatatype.SOA:
                if name != "@" or soa is not None:
                    continue
                soa = SOAData(
                    primary_server=rdata.mname.to_text(),
                    admin_mailbox=rdata.rname.to_text(),
                    serial=rdata.serial,
                    refresh=rdata.refresh,
                    retry=rdata.retry,
                    expire=rdata.expire,
                    min_ttl=rdata.minimum,
                )
                continue

            if rdata.rdtype == dns.rdatatype.NS and name == "@":
                continue

            record = self._to_record(name, ttl, rdata)
            if record is not None:
                records.append(record)

        return records, soa

    @staticmethod
    def _to_record(name: str, ttl: int, rdata) -> Record | None:
        rdtype = rdata.rdtype

        if rdtype == dns.rdatatype.A:
            return Record(name=name, record_type=RecordType.A, ttl=ttl, value=rdata.address)
        if rdtype == dns.rdatatype.AAAA:
            return Record(name=name, record_type=RecordType.AAAA, ttl=ttl, value=rdata.address)
        if rdtype == dns.rdatatype.CNAME:
            return Record(
                name=name, record_type=RecordType.CNAME, ttl=ttl, value=rdata.target.to_text()
            )
        if rdtype == dns.rdatatype.NS:
            return Record(
                name=name, record_type=RecordType.NS, ttl=ttl, value=rdata.target.to_text()
            )
        if rdtype == dns.rdatatype.MX:
            return Record(
                name=name,
                record_type=RecordType.MX,
                ttl=ttl,
                value=rdata.exchange.to_text(),
                priority=rdata.preference,
            )
        if rdtype == dns.rdatatype.TXT:
            return Record(
                name=name, record_type=RecordType.TXT, ttl=ttl, value=_txt_value(rdata)
            )

        # Types outside the editable set are kept in raw but not listed
        return None

    # ========================================================================
    # Formatting
    # ========================================================================

    def format_record(self, record: Record) -> str:
        """Render a record as a single zone file line."""
        ttl = f"{record.ttl} " if record.ttl > 0 else ""
        rtype = record.record_type

        if rtype == RecordType.MX:
            return f"{record.name} {ttl}IN MX {record.priority} {record.value}"
        if rtype == RecordType.TXT:
            value = record.value
            if not value.startswith('"'):
                value = f'"{value}"'
            return f"{record.name} {ttl}IN TXT {value}"
        return f"{record.name} {ttl}IN {rtype.value} {record.value}"

    def default_content(self, domain: str, today: date | None = None) -> str:
        """Minimal valid zone: SOA with today's serial plus the apex NS."""
        today = today or date.today()
        return DEFAULT_ZONE_TEMPLATE.format(origin=fqdn(domain), serial=serial_for(today))

    # ========================================================================
    # Serial
    # ========================================================================

    def increment_serial(self, content: str, today: date | None = None) -> str:
        """
        Bump the ``YYYYMMDDNN`` SOA serial.

        The serial is found heuristically: the first 10-digit token followed
        by a ``; serial`` comment, else the first whitespace-delimited
        10-digit token. Same day increments ``NN``, any other day resets to
        ``<today>01``. Content without such a token is returned unchanged.
        """
        match = SERIAL_WITH_COMMENT.search(content) or SERIAL_PLAIN.search(content)
        if match is None:
            logger.debug("No SOA serial token found, serial left unchanged")
            return content

        today = today or date.today()
        old_serial = match.group(2)
        today_str = today.strftime("%Y%m%d")

        if old_serial.startswith(today_str):
            # NN past 99 is not wrapped
            new_serial = f"{today_str}{int(old_serial[8:]) + 1:02d}"
        else:
            new_serial = serial_for(today)

        logger.debug(f"SOA serial {old_serial} -> {new_serial}")
        replacement = match.group(1) + new_serial + match.group(3)
        return content[: match.start()] + replacement + content[match.end() :]

    # ========================================================================
    # Text mutation
    # ========================================================================

    def check_record(self, record: Record, origin: str) -> None:
        """
        Make sure a record renders to exactly one valid zone file line.

        Raises:
            ValidationError: If the name or value is malformed for its type
        """
        rtype = record.record_type
        if not record.name or any(c.isspace() for c in record.name):
            raise ValidationError(f"invalid record name: {record.name!r}")
        if any(c in record.value for c in "\r\n") or (
            rtype != RecordType.TXT and any(c.isspace() for c in record.value)
        ):
            raise ValidationError(f"invalid {rtype.value} value: {record.value!r}")

        line = self.format_record(record)
        try:
            fragment = read_records(f"$TTL {FRAGMENT_TTL}\n{line}\n", origin)
        except ParseError as e:
            raise ValidationError(f"invalid {rtype.value} record {line!r}: {e}") from e

        if len(fragment) != 1 or fragment[0][2].rdtype != dns.rdatatype.from_text(rtype.value):
            raise ValidationError(f"record does not form a single {rtype.value} entry: {line!r}")

    def add_record(self, content: str, record: Record) -> str:
        """Append a record line, keeping everything else verbatim."""
        if content and not content.endswith("\n"):
            content += "\n"
        return content + self.format_record(record) + "\n"

    def remove_record(
        self,
        content: str,
        name: str,
        record_type: RecordType,
        value: str,
        origin: str,
    ) -> str:
        """
        Remove the first line holding the given record.

        Raises:
            RecordNotFoundError: If no line matches
        """
        lines = content.split("\n")
        for i, line in enumerate(lines):
            if self.matches_record(line, name, record_type, value, origin):
                del lines[i]
                return "\n".join(lines)

        raise RecordNotFoundError(f"record not found: {name} {record_type.value} {value}")

    def matches_record(
        self,
        line: str,
        name: str,
        record_type: RecordType,
        value: str,
        origin: str,
    ) -> bool:
        """Check whether a single zone file line holds the given record."""
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(";") or trimmed.startswith("$"):
            return False

        # Parse the line on its own; continuation lines simply fail to parse
        try:
            fragment = read_records(f"$TTL {FRAGMENT_TTL}\n{trimmed}\n", origin)
        except ParseError:
            return False

        for owner, ttl, rdata in fragment:
            if relative_name(owner, origin) != name:
                return False
            record = self._to_record(name, ttl, rdata)
            if record is None or record.record_type != record_type:
                return False
            if record.value == value:
                return True
            return record_type in NAME_VALUED_TYPES and record.value == fqdn(value)

        return False

    # ========================================================================
    # Validation
    # ========================================================================

    def validate(self, domain: str, content: str) -> None:
        """
        Require parseable content with an SOA record.

        Raises:
            ParseError: On grammar errors
            ValidationError: On blank content or a missing SOA
        """
        if not content.strip():
            raise ValidationError("zone file content cannot be empty")

        _, soa = self.parse(content, fqdn(domain))
        if soa is None:
            raise ValidationError("zone file must contain an SOA record")


def _txt_value(rdata) -> str:
    return " ".join(s.decode("utf-8", errors="replace") for s in rdata.strings)


class ZoneManager(BaseFileManager):
    """Manage ``db.<domain>`` zone files in one directory."""

    artifact = "zone file"
    prefix = ZONE_PREFIX
    temp_prefix = ".zone-"

    def __init__(self, directory: str | Path, codec: ZoneCodec | None = None):
        super().__init__(directory)
        self._codec = codec or ZoneCodec()

    @property
    def codec(self) -> ZoneCodec:
        return self._codec

    def _accepts(self, domain: str) -> bool:
        # GSLB configs (db.<domain>.yml) may share the zone directory
        return not domain.endswith(GSLB_SUFFIX)

    def read(self, domain: str) -> ZoneFile:
        """Read and parse a zone file."""
        validate_domain(domain)
        with self.lock.read_locked():
            raw = self._read_text(domain)

        records, soa = self.codec.parse(raw, fqdn(domain))
        logger.debug(f"Read zone {domain}: {len(records)} records")
        return ZoneFile(domain=domain, records=records, soa=soa, raw=raw)

    def write(self, domain: str, content: str, validate: bool = True) -> None:
        """
        Save zone content, bumping the SOA serial.

        Raises:
            ValidationError: If ``validate`` is set and the content has no SOA
                or does not parse
        """
        validate_domain(domain)
        content = normalize_content(content)
        if validate:
            self.codec.validate(domain, content)

        content = self.codec.increment_serial(content)
        with self.lock.write_locked():
            self._write_text(domain, content)
        logger.info(f"Wrote zone file {domain}")

    def add_record(self, domain: str, record: Record) -> None:
        """
        Append a record line and bump the serial.

        Raises:
            ValidationError: If the record is malformed or the resulting zone
                does not parse; the file is untouched
        """
        validate_domain(domain)
        self.codec.check_record(record, fqdn(domain))
        with self.lock.write_locked():
            content = self._read_text(domain)
            content = self.codec.add_record(content, record)
            self.codec.validate(domain, content)
            content = self.codec.increment_serial(content)
            self._write_text(domain, content)
        logger.info(f"Added {record.record_type.value} record {record.name} to zone {domain}")

    def remove_record(self, domain: str, name: str, record_type: RecordType, value: str) -> None:
        """
        Remove the first matching record line and bump the serial.

        Raises:
            RecordNotFoundError: If nothing matches; the file is untouched
        """
        validate_domain(domain)
        with self.lock.write_locked():
            content = self._read_text(domain)
            content = self.codec.remove_record(content, name, record_type, value, fqdn(domain))
            content = self.codec.increment_serial(content)
            self._write_text(domain, content)
        logger.info(f"Removed {record_type.value} record {name} from zone {domain}")

    def validate(self, domain: str, content: str) -> None:
        validate_domain(domain)
        self.codec.validate(domain, content)

    def record_counts(self) -> dict[str, int]:
        """Editable record count per zone; unparseable zones count as 0."""
        counts = {}
        for domain in self.list():
            try:
                counts[domain] = len(self.read(domain).records)
            except ValidationError as e:
                logger.debug(f"Zone {domain} does not parse: {e}")
                counts[domain] = 0
        return counts
