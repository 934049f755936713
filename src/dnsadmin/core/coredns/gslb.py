"""GSLB YAML configuration files (``db.<domain>.yml``)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pydantic
import yaml

from dnsadmin.core.base import BaseConfigCodec, BaseFileManager
from dnsadmin.core.exceptions import (
    AlreadyExistsError,
    IndexOutOfRangeError,
    NotFoundError,
    ParseError,
    RecordNotFoundError,
    ValidationError,
)
from dnsadmin.core.models import (
    GSLBBackend,
    GSLBConfig,
    GSLBEntry,
    GSLBMode,
    GSLBRecord,
    HealthcheckProfile,
)
from dnsadmin.core.storage import normalize_content, validate_domain

logger = logging.getLogger(__name__)

GSLB_PREFIX = "db."
GSLB_SUFFIX = ".yml"

VALID_MODES = [mode.value for mode in GSLBMode]

# Backend keys written only when set
OPTIONAL_BACKEND_FIELDS = ("priority", "weight", "location", "disabled", "healthchecks", "meta")


def sorted_record_names(records: dict[str, Any]) -> list[str]:
    """Record names in alphabetical order."""
    return sorted(records)


class GSLBCodec(BaseConfigCodec):
    """
    YAML serialization and validation of GSLB configs.

    Unlike zone and hosts files, GSLB configs are rewritten from the
    structured form on every structural mutation.
    """

    def parse(self, content: str) -> GSLBConfig:
        return self.load(content)

    def load(self, content: str) -> GSLBConfig:
        """
        Deserialize YAML into a ``GSLBConfig``.

        Raises:
            ParseError: If the text is not YAML or not a mapping
            ValidationError: If the mapping does not fit the GSLB model
        """
        try:
            return GSLBConfig.model_validate(self._load_mapping(content))
        except pydantic.ValidationError as e:
            raise ValidationError(f"invalid GSLB config: {_first_error(e)}") from e

    def _load_mapping(self, content: str) -> dict[str, Any]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ParseError(f"invalid YAML: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ParseError("GSLB config must be a YAML mapping")
        return data

    def dump(self, config: GSLBConfig) -> str:
        """Serialize a config, leaving out unset optional backend fields."""
        data: dict[str, Any] = {}

        if config.healthcheck_profiles:
            data["healthcheck_profiles"] = {
                name: self._dump_profile(profile)
                for name, profile in config.healthcheck_profiles.items()
            }

        data["records"] = {
            name: {
                "mode": record.mode.value,
                "record_ttl": record.record_ttl,
                "scrape_interval": record.scrape_interval,
                "backends": [self._dump_backend(b) for b in record.backends],
            }
            for name, record in config.records.items()
        }

        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    @staticmethod
    def _dump_profile(profile: HealthcheckProfile) -> dict[str, Any]:
        out: dict[str, Any] = {"type": profile.type}
        if profile.params:
            out["params"] = dict(profile.params)
        return out

    @staticmethod
    def _dump_backend(backend: GSLBBackend) -> dict[str, Any]:
        out: dict[str, Any] = {"address": backend.address}
        for field in OPTIONAL_BACKEND_FIELDS:
            value = getattr(backend, field)
            if value:
                out[field] = value
        return out

    def validate_raw(self, content: str) -> None:
        """
        Check raw YAML before it is saved.

        Raises:
            ParseError: If the YAML does not deserialize
            ValidationError: If the config is blank, has no records, or has a
                record with an unknown mode, no backends, or a backend without
                an address
        """
        if not content.strip():
            raise ValidationError("GSLB config cannot be empty")

        data = self._load_mapping(content)
        records = data.get("records")
        if not records:
            raise ValidationError("GSLB config must contain at least one record")
        if not isinstance(records, dict):
            raise ValidationError("GSLB records must be a mapping of name to record")

        for name, record in records.items():
            if not isinstance(record, dict):
                raise ValidationError(f"record {name!r} is empty")
            mode = record.get("mode")
            if mode not in VALID_MODES:
                raise ValidationError(
                    f"record {name!r} has invalid mode {mode!r} (valid: {', '.join(VALID_MODES)})"
                )
            backends = record.get("backends") or []
            if not backends:
                raise ValidationError(f"record {name!r} must have at least one backend")
            for i, backend in enumerate(backends, 1):
                if not isinstance(backend, dict) or not backend.get("address"):
                    raise ValidationError(f"record {name!r} backend {i} has no address")

        # Field types (ints, bools, ...) are checked by the model
        self.load(content)

    def default_config(self, domain: str) -> GSLBConfig:
        """Starter config with an HTTP health check and one failover record."""
        fqdn = domain if domain.endswith(".") else domain + "."
        return GSLBConfig(
            healthcheck_profiles={
                "http_default": HealthcheckProfile(
                    type="http",
                    params={
                        "port": 80,
                        "uri": "/",
                        "expected_code": 200,
                        "timeout": "5s",
                    },
                ),
            },
            records={
                f"app.{fqdn}": GSLBRecord(
                    mode=GSLBMode.FAILOVER,
                    record_ttl=30,
                    scrape_interval="10s",
                    backends=[
                        GSLBBackend(
                            address="192.168.1.10",
                            priority=1,
                            healthchecks=["http_default"],
                        )
                    ],
                ),
            },
        )

    def default_content(self, domain: str) -> str:
        return self.dump(self.default_config(domain))


def _first_error(error: pydantic.ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


class GSLBManager(BaseFileManager):
    """Manage ``db.<domain>.yml`` GSLB configs in one directory."""

    artifact = "GSLB config"
    prefix = GSLB_PREFIX
    suffix = GSLB_SUFFIX
    temp_prefix = ".gslb-"

    def __init__(self, directory: str | Path, codec: GSLBCodec | None = None):
        super().__init__(directory)
        self._codec = codec or GSLBCodec()

    @property
    def codec(self) -> GSLBCodec:
        return self._codec

    # ========================================================================
    # Whole-file operations
    # ========================================================================

    def list(self) -> list[GSLBEntry]:
        """Summaries of every GSLB config, sorted by domain."""
        with self.lock.read_locked():
            domains = self._list_domains()
            entries = []
            for domain in domains:
                entry = GSLBEntry(domain=domain)
                try:
                    config = self._load(domain)
                except (NotFoundError, ValidationError) as e:
                    logger.debug(f"GSLB config {domain} unreadable: {e}")
                else:
                    entry.record_count = len(config.records)
                    entry.backend_count = sum(len(r.backends) for r in config.records.values())
                entries.append(entry)
        return entries

    def read(self, domain: str) -> GSLBConfig:
        validate_domain(domain)
        with self.lock.read_locked():
            return self._load(domain)

    def write(self, domain: str, config: GSLBConfig) -> None:
        """Serialize and save a structured config."""
        validate_domain(domain)
        with self.lock.write_locked():
            self._store(domain, config)
        logger.info(f"Wrote GSLB config {domain}")

    def write_raw(self, domain: str, content: str) -> None:
        """Validate and save raw YAML exactly as given (line endings normalized)."""
        validate_domain(domain)
        content = normalize_content(content)
        self.codec.validate_raw(content)
        with self.lock.write_locked():
            self._write_text(domain, content)
        logger.info(f"Wrote raw GSLB config {domain}")

    def validate_raw(self, content: str) -> None:
        self.codec.validate_raw(content)

    # ========================================================================
    # Structural mutations
    # ========================================================================

    def add_record(
        self,
        domain: str,
        record_name: str,
        mode: GSLBMode | str,
        ttl: int,
        scrape_interval: str,
    ) -> None:
        """
        Add an empty record; backends are added separately.

        Raises:
            AlreadyExistsError: If ``record_name`` is taken
        """
        validate_domain(domain)
        record = self._new_record(mode, ttl, scrape_interval)
        with self.lock.write_locked():
            config = self._load(domain)
            if record_name in config.records:
                raise AlreadyExistsError(f"record {record_name!r} already exists")
            config.records[record_name] = record
            self._store(domain, config)
        logger.info(f"Added GSLB record {record_name} to {domain}")

    def remove_record(self, domain: str, record_name: str) -> None:
        validate_domain(domain)
        with self.lock.write_locked():
            config = self._load(domain)
            self._get_record(config, record_name)
            del config.records[record_name]
            self._store(domain, config)
        logger.info(f"Removed GSLB record {record_name} from {domain}")

    def update_record(
        self,
        domain: str,
        record_name: str,
        mode: GSLBMode | str,
        ttl: int,
        scrape_interval: str,
    ) -> None:
        """Change a record's mode, TTL and scrape interval, keeping its backends."""
        validate_domain(domain)
        updated = self._new_record(mode, ttl, scrape_interval)
        with self.lock.write_locked():
            config = self._load(domain)
            record = self._get_record(config, record_name)
            record.mode = updated.mode
            record.record_ttl = updated.record_ttl
            record.scrape_interval = updated.scrape_interval
            self._store(domain, config)
        logger.info(f"Updated GSLB record {record_name} in {domain}")

    def add_backend(self, domain: str, record_name: str, backend: GSLBBackend) -> None:
        validate_domain(domain)
        if not backend.address:
            raise ValidationError("backend address cannot be empty")
        with self.lock.write_locked():
            config = self._load(domain)
            record = self._get_record(config, record_name)
            record.backends.append(backend)
            self._store(domain, config)
        logger.info(f"Added backend {backend.address} to GSLB record {record_name} in {domain}")

    def remove_backend(self, domain: str, record_name: str, index: int) -> None:
        """
        Remove a backend by position.

        Raises:
            IndexOutOfRangeError: If ``index`` is outside ``[0, len(backends))``
        """
        validate_domain(domain)
        with self.lock.write_locked():
            config = self._load(domain)
            record = self._get_record(config, record_name)
            if index < 0 or index >= len(record.backends):
                raise IndexOutOfRangeError(f"backend index {index} out of range")
            removed = record.backends.pop(index)
            self._store(domain, config)
        logger.info(f"Removed backend {removed.address} from GSLB record {record_name} in {domain}")

    # ========================================================================
    # Helpers (callers hold self.lock)
    # ========================================================================

    def _load(self, domain: str) -> GSLBConfig:
        return self.codec.load(self._read_text(domain))

    def _store(self, domain: str, config: GSLBConfig) -> None:
        self._write_text(domain, self.codec.dump(config))

    @staticmethod
    def _get_record(config: GSLBConfig, record_name: str) -> GSLBRecord:
        try:
            return config.records[record_name]
        except KeyError:
            raise RecordNotFoundError(f"record {record_name!r} not found") from None

    @staticmethod
    def _new_record(mode: GSLBMode | str, ttl: int, scrape_interval: str) -> GSLBRecord:
        try:
            return GSLBRecord(mode=mode, record_ttl=ttl, scrape_interval=scrape_interval)
        except pydantic.ValidationError as e:
            raise ValidationError(f"invalid GSLB record: {_first_error(e)}") from e
