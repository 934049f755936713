"""Core data models for dnsadmin."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

UINT16_MAX = 2**16 - 1
UINT32_MAX = 2**32 - 1


class RecordType(str, Enum):
    """Editable zone record types."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    MX = "MX"
    TXT = "TXT"
    NS = "NS"


class GSLBMode(str, Enum):
    """GSLB backend selection policies."""

    FAILOVER = "failover"
    ROUNDROBIN = "roundrobin"
    RANDOM = "random"
    WEIGHTED = "weighted"
    GEOIP = "geoip"


# ============================================================================
# Zone Models
# ============================================================================


class Record(BaseModel):
    """Single zone record, named relative to the zone origin."""

    name: str = Field(..., description='Relative owner name, "@" for the apex')
    record_type: RecordType
    ttl: int = Field(default=0, ge=0, le=UINT32_MAX, description="0 inherits $TTL")
    value: str
    priority: int = Field(default=0, ge=0, le=UINT16_MAX, description="MX preference")


class SOAData(BaseModel):
    """Start of authority fields."""

    primary_server: str
    admin_mailbox: str
    serial: int = Field(..., ge=0, le=UINT32_MAX)
    refresh: int = Field(..., ge=0, le=UINT32_MAX)
    retry: int = Field(..., ge=0, le=UINT32_MAX)
    expire: int = Field(..., ge=0, le=UINT32_MAX)
    min_ttl: int = Field(..., ge=0, le=UINT32_MAX)


class ZoneFile(BaseModel):
    """Parsed zone file. ``raw`` is authoritative, the rest is derived."""

    domain: str
    records: list[Record] = Field(default_factory=list)
    soa: SOAData | None = None
    raw: str = ""


# ============================================================================
# Hosts Models
# ============================================================================


class HostEntry(BaseModel):
    """IP to hostname mapping."""

    ip: str
    hostname: str


class HostFile(BaseModel):
    """Parsed hosts file. ``raw`` is authoritative."""

    domain: str
    entries: list[HostEntry] = Field(default_factory=list)
    raw: str = ""


# ============================================================================
# GSLB Models
# ============================================================================


class YAMLModel(BaseModel):
    """Model read from YAML, where a key with no value decodes to ``None``."""

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        fields = cls.model_fields
        return {
            key: value
            for key, value in data.items()
            if value is not None or key not in fields or fields[key].is_required()
        }


class HealthcheckProfile(YAMLModel):
    """Reusable health check template."""

    type: str
    params: dict[str, Any] = Field(default_factory=dict)


class GSLBBackend(YAMLModel):
    """Backend server for GSLB routing."""

    address: str
    priority: int = 0
    weight: int = 0
    location: str = ""
    disabled: bool = False
    healthchecks: list[Any] = Field(default_factory=list)  # profile names or inline checks
    meta: dict[str, Any] = Field(default_factory=dict)


class GSLBRecord(YAMLModel):
    """GSLB managed DNS record."""

    mode: GSLBMode
    record_ttl: int = 0
    scrape_interval: str = ""
    backends: list[GSLBBackend] = Field(default_factory=list)


class GSLBConfig(YAMLModel):
    """Complete GSLB YAML configuration file."""

    healthcheck_profiles: dict[str, HealthcheckProfile] = Field(default_factory=dict)
    records: dict[str, GSLBRecord] = Field(default_factory=dict)


class GSLBEntry(BaseModel):
    """Summary of one GSLB config for list views."""

    domain: str
    record_count: int = 0
    backend_count: int = 0
