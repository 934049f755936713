"""All-or-nothing file replacement."""

import logging
import os
import stat
import tempfile
from pathlib import Path

from dnsadmin.core.exceptions import StorageError

logger = logging.getLogger(__name__)


def normalize_content(content: str) -> str:
    """Convert CRLF line endings to LF and ensure a trailing LF."""
    content = content.replace("\r\n", "\n")
    if not content.endswith("\n"):
        content += "\n"
    return content


class AtomicFileWriter:
    """
    Replace file contents via write-to-temp-then-rename.

    The temporary file lives in the target's directory so the final
    ``os.replace`` stays on one filesystem. Readers opening the target
    see either the old or the new content, never a partial write. The
    writer gives no isolation between concurrent writers; managers hold
    their own lock for that.
    """

    def __init__(self, temp_prefix: str = ".dnsadmin-", fsync: bool = True):
        self.temp_prefix = temp_prefix
        self.fsync = fsync

    def write(self, path: str | Path, content: str) -> None:
        """Normalize ``content`` and atomically replace ``path`` with it."""
        path = Path(path)
        content = normalize_content(content)

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=self.temp_prefix, suffix=".tmp", dir=path.parent
            )
        except OSError as e:
            raise StorageError(f"failed to create temp file: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
                f.flush()
                if self.fsync:
                    os.fsync(f.fileno())

            # Preserve permissions if the target exists
            try:
                mode = stat.S_IMODE(path.stat().st_mode)
            except FileNotFoundError:
                mode = None
            if mode is not None:
                os.chmod(tmp_path, mode)

            os.replace(tmp_path, path)
        except BaseException as e:
            self._discard(tmp_path)
            if isinstance(e, OSError):
                raise StorageError(f"failed to write {path}: {e}") from e
            raise

        logger.debug(f"Atomically wrote {len(content)} bytes to {path}")

    @staticmethod
    def _discard(tmp_path: Path) -> None:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temp file {tmp_path}: {e}")
