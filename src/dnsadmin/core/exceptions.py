"""Error types raised by the configuration core."""


class DNSAdminError(Exception):
    """Base class for all configuration core errors."""


class InvalidDomainError(DNSAdminError, ValueError):
    """Domain name is unsafe or malformed. No I/O was performed."""


class NotFoundError(DNSAdminError, LookupError):
    """Artifact, record or backend does not exist."""


class RecordNotFoundError(NotFoundError):
    """No record matched inside an existing artifact."""


class AlreadyExistsError(DNSAdminError):
    """Artifact or record name is already present."""


class ValidationError(DNSAdminError):
    """Content is semantically invalid (missing SOA, bad mode, ...)."""


class ParseError(ValidationError):
    """Content could not be parsed at all."""


class StorageError(DNSAdminError):
    """Filesystem read, write or rename failed."""


class IndexOutOfRangeError(DNSAdminError, IndexError):
    """Backend index outside the record's backend list."""


class ConfigurationError(DNSAdminError):
    """Required settings are missing or inconsistent."""
