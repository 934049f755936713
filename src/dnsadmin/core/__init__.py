"""Core library: artifact codecs, managers and safe persistence."""

from dnsadmin.core.exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    DNSAdminError,
    IndexOutOfRangeError,
    InvalidDomainError,
    NotFoundError,
    ParseError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)
from dnsadmin.core.models import (
    GSLBBackend,
    GSLBConfig,
    GSLBEntry,
    GSLBMode,
    GSLBRecord,
    HealthcheckProfile,
    HostEntry,
    HostFile,
    Record,
    RecordType,
    SOAData,
    ZoneFile,
)

__all__ = [
    "AlreadyExistsError",
    "ConfigurationError",
    "DNSAdminError",
    "IndexOutOfRangeError",
    "InvalidDomainError",
    "NotFoundError",
    "ParseError",
    "RecordNotFoundError",
    "StorageError",
    "ValidationError",
    "GSLBBackend",
    "GSLBConfig",
    "GSLBEntry",
    "GSLBMode",
    "GSLBRecord",
    "HealthcheckProfile",
    "HostEntry",
    "HostFile",
    "Record",
    "RecordType",
    "SOAData",
    "ZoneFile",
]
