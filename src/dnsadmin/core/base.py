"""Abstract base classes shared by the artifact codecs and managers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from dnsadmin.core.exceptions import AlreadyExistsError, NotFoundError, ParseError, StorageError
from dnsadmin.core.storage import AtomicFileWriter, ReadWriteLock, is_valid_domain, validate_domain

logger = logging.getLogger(__name__)


class BaseConfigCodec(ABC):
    """Abstract base class for artifact codecs. Codecs are pure and stateless."""

    @abstractmethod
    def parse(self, content: str, *args: Any) -> Any:
        """Parse artifact text into structured data."""
        ...

    @abstractmethod
    def default_content(self, domain: str) -> str:
        """Text of a freshly created artifact for ``domain``."""
        ...


class BaseFileManager(ABC):
    """
    CRUD facade over one directory of per-domain artifact files.

    Files are named ``<prefix><domain><suffix>``. Every public operation
    validates the domain before touching the filesystem. Pure reads take the
    read side of ``self.lock``; every read-modify-write takes the write side
    for the whole sequence.
    """

    artifact = "file"
    prefix = ""
    suffix = ""
    temp_prefix = ".dnsadmin-"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.lock = ReadWriteLock()
        self.writer = AtomicFileWriter(temp_prefix=self.temp_prefix)

    @property
    @abstractmethod
    def codec(self) -> BaseConfigCodec:
        ...

    @abstractmethod
    def read(self, domain: str) -> Any:
        """Read and parse the artifact for ``domain``."""
        ...

    # ========================================================================
    # Naming
    # ========================================================================

    def filename(self, domain: str) -> Path:
        return self.directory / f"{self.prefix}{domain}{self.suffix}"

    def domain_from_filename(self, name: str) -> str | None:
        """Inverse of ``filename``; None if ``name`` is not one of ours."""
        if not name.startswith(self.prefix) or not name.endswith(self.suffix):
            return None
        domain = name[len(self.prefix) :]
        if self.suffix:
            domain = domain[: -len(self.suffix)]
        return domain or None

    def _accepts(self, domain: str) -> bool:
        """Extra filter applied by ``list``."""
        return True

    # ========================================================================
    # Operations
    # ========================================================================

    def list(self) -> list[str]:
        """Sorted domains that have an artifact in the directory."""
        with self.lock.read_locked():
            return self._list_domains()

    def read_raw(self, domain: str) -> str:
        """Exact text of the artifact."""
        validate_domain(domain)
        with self.lock.read_locked():
            return self._read_text(domain)

    def exists(self, domain: str) -> bool:
        if not is_valid_domain(domain):
            return False
        return self.filename(domain).is_file()

    def create(self, domain: str) -> None:
        """Write the default artifact; fails if one already exists."""
        validate_domain(domain)
        with self.lock.write_locked():
            if self.filename(domain).exists():
                raise AlreadyExistsError(f"{self.artifact} already exists: {domain}")
            self._write_text(domain, self.codec.default_content(domain))
        logger.info(f"Created {self.artifact} {domain}")

    def delete(self, domain: str) -> None:
        validate_domain(domain)
        with self.lock.write_locked():
            try:
                self.filename(domain).unlink()
            except FileNotFoundError as e:
                raise NotFoundError(f"{self.artifact} does not exist: {domain}") from e
            except OSError as e:
                raise StorageError(f"failed to delete {self.artifact} {domain}: {e}") from e
        logger.info(f"Deleted {self.artifact} {domain}")

    # ========================================================================
    # Unlocked helpers (callers hold self.lock)
    # ========================================================================

    def _list_domains(self) -> list[str]:
        try:
            entries = list(self.directory.iterdir())
        except OSError as e:
            raise StorageError(f"failed to read directory {self.directory}: {e}") from e

        domains = []
        for entry in entries:
            if not entry.is_file():
                continue
            domain = self.domain_from_filename(entry.name)
            if domain and self._accepts(domain):
                domains.append(domain)
        return sorted(domains)

    def _read_text(self, domain: str) -> str:
        path = self.filename(domain)
        try:
            # newline="" keeps the bytes exactly as stored
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"{self.artifact} does not exist: {domain}") from e
        except UnicodeDecodeError as e:
            raise ParseError(f"{self.artifact} {domain} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"failed to read {self.artifact} {domain}: {e}") from e

    def _write_text(self, domain: str, content: str) -> None:
        self.writer.write(self.filename(domain), content)
