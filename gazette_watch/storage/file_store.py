"""
File-backed key-value store.

Each key is one file inside a directory. Writes go to a temporary file
that replaces the target, so a reader never sees a half-written blob.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import structlog

logger = structlog.get_logger(__name__)


class FileKeyValueStore:
    """KeyValueStore persisting blobs under a directory."""

    def __init__(self, directory: str):
        """
        Initialize store.

        Args:
            directory: Directory holding one file per key (created if missing)
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Keys may contain "/" (e.g., "DOE/PB"); keep them flat.
        return self.directory / quote(key, safe=".-_")

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug("store_write", key=key, size=len(value))
