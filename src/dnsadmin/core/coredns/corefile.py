"""Opaque Corefile handling for CoreDNS."""

import logging
from pathlib import Path

from dnsadmin.core.exceptions import NotFoundError, ParseError, StorageError, ValidationError
from dnsadmin.core.storage import AtomicFileWriter, ReadWriteLock

logger = logging.getLogger(__name__)


class CorefileManager:
    """
    Read, check and atomically rewrite the CoreDNS Corefile.

    The Corefile is not parsed; the only structural check is that ``{`` and
    ``}`` counts balance.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.lock = ReadWriteLock()
        self.writer = AtomicFileWriter(temp_prefix=".corefile-")

    def read(self) -> str:
        with self.lock.read_locked():
            try:
                with open(self.path, encoding="utf-8", newline="") as f:
                    return f.read()
            except FileNotFoundError as e:
                raise NotFoundError(f"Corefile does not exist: {self.path}") from e
            except UnicodeDecodeError as e:
                raise ParseError(f"Corefile is not valid UTF-8: {e}") from e
            except OSError as e:
                raise StorageError(f"failed to read Corefile: {e}") from e

    def write(self, content: str) -> None:
        with self.lock.write_locked():
            self.writer.write(self.path, content)
        logger.info(f"Wrote Corefile {self.path}")

    def validate(self, content: str) -> None:
        """
        Raises:
            ValidationError: If the content is blank or braces are unbalanced
        """
        content = content.strip()
        if not content:
            raise ValidationError("Corefile cannot be empty")

        opening = content.count("{")
        closing = content.count("}")
        if opening != closing:
            raise ValidationError(f"unbalanced braces: {opening} opening, {closing} closing")
