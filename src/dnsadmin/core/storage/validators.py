"""
Domain name validation.

Domain names supplied by callers become filename components
(``db.<domain>``, ``hosts.<domain>``), so this check is what keeps a
request from escaping the configured directories.
"""

import logging
import re

from dnsadmin.core.exceptions import InvalidDomainError

logger = logging.getLogger(__name__)

DOMAIN_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9.-]*[a-zA-Z0-9]$")


def validate_domain(domain: str) -> None:
    """
    Validate a domain or zone identifier.

    Args:
        domain: Domain name without any file prefix or suffix

    Raises:
        InvalidDomainError: If the name is empty, contains path characters,
            contains ``..`` or has characters outside ``[A-Za-z0-9.-]``
    """
    if not domain:
        raise InvalidDomainError("domain cannot be empty")
    if "/" in domain or "\\" in domain:
        raise InvalidDomainError("domain contains invalid path characters")
    if ".." in domain:
        raise InvalidDomainError("domain contains path traversal sequence")
    if not DOMAIN_PATTERN.fullmatch(domain):
        raise InvalidDomainError("domain contains invalid characters (allowed: a-z, 0-9, ., -)")


def is_valid_domain(domain: str) -> bool:
    """Return True if ``validate_domain`` would accept the name."""
    try:
        validate_domain(domain)
    except InvalidDomainError as e:
        logger.debug(f"Rejected domain {domain!r}: {e}")
        return False
    return True
