"""Key-value blob storage for persisted documents.

Values are opaque strings (the statistics ledger stores a JSON document).
The local implementation keeps one ``<key>.json`` file per key, written
atomically with owner-only permissions (0o600) inside an owner-only
directory (0o700).
"""

import contextlib
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_DATA_DIR_MODE = 0o700
_DATA_FILE_MODE = 0o600

_VALID_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def _validate_key(key: str) -> None:
    if not _VALID_KEY.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")


class BlobStore(Protocol):
    """Protocol for a whole-value key-value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryBlobStore:
    """Process-local store, used when nothing must survive a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value


class LocalBlobStore:
    """Stores each value as a UTF-8 file under a directory."""

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir).resolve()

    def _path_for(self, key: str) -> Path:
        _validate_key(key)
        target = (self._data_dir / f"{key}.json").resolve()
        if not target.is_relative_to(self._data_dir):
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside data directory")
        return target

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""
        target = self._path_for(key)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        """Replace the stored value atomically via temp-file-then-rename.

        Creates the data directory lazily on first write.
        """
        target = self._path_for(key)
        self._data_dir.mkdir(mode=_DATA_DIR_MODE, parents=True, exist_ok=True)
        self._data_dir.chmod(_DATA_DIR_MODE)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._data_dir), suffix=".tmp", prefix=f".{key}_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(value.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _DATA_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("saved blob", key=key, path=str(target), size=len(value))
