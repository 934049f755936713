"""Filesystem safety: domain validation, atomic writes and locking."""

from dnsadmin.core.storage.atomic import AtomicFileWriter, normalize_content
from dnsadmin.core.storage.locking import ReadWriteLock
from dnsadmin.core.storage.validators import is_valid_domain, validate_domain

__all__ = [
    "AtomicFileWriter",
    "ReadWriteLock",
    "is_valid_domain",
    "normalize_content",
    "validate_domain",
]
