"""Key-value medium backed by JSON documents on local disk.

Each key maps to ``<base_dir>/<key>.json``. Writes go to a temporary file
in the same directory and are moved into place with ``os.replace``, so a
reader sees either the previous document or the new one.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from src.errors import StorageError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore:
    """Durable key-value medium of JSON documents.

    Args:
        base_dir: Directory holding one file per key. Created on first write.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._base_dir / f"{key}.json"

    def read(self, key: str) -> Any | None:
        """Read and decode the document under ``key``.

        Returns:
            Decoded JSON value, or None when the key has never been written.

        Raises:
            StorageError: If the file cannot be read or does not hold JSON.
        """
        path = self._path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageError(f"Corrupt document at {path}: {e}") from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt document at {path}: {e}") from e

    def write(self, key: str, value: Any) -> None:
        """Encode ``value`` as JSON and replace the document under ``key``.

        Raises:
            StorageError: If the value is not serializable or the write fails.
        """
        path = self._path_for(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON serializable: {e}") from e

        tmp_name: str | None = None
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._base_dir, prefix=f".{key}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_name)

    def delete(self, key: str) -> bool:
        """Remove the document under ``key``.

        Returns:
            True if a document was removed, False if none existed.

        Raises:
            StorageError: If the file exists but cannot be removed.
        """
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e
        return True
