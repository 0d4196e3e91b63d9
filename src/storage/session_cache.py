"""Cache of the last fetched timeline.

Holds at most one snapshot. A lost or corrupt snapshot only costs a
re-fetch, so every failure here is logged and swallowed.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from src.errors import StorageError
from src.storage.kv import JsonFileStore
from src.storage.schemas import SessionSnapshot

logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "session_snapshot"


class SessionCache:
    """Single-slot, last-write-wins snapshot cache."""

    def __init__(self, medium: JsonFileStore, key: str = DEFAULT_SESSION_KEY) -> None:
        self._medium = medium
        self._key = key

    def save(self, snapshot: SessionSnapshot) -> bool:
        """Replace the cached snapshot. Returns False if the write failed."""
        try:
            self._medium.write(self._key, snapshot.to_storage())
        except StorageError as e:
            logger.warning("Failed to cache session snapshot: %s", e)
            return False
        logger.debug(
            "Cached %d activities for %s",
            len(snapshot.activities),
            snapshot.repository.full_name,
        )
        return True

    def load(self) -> SessionSnapshot | None:
        """Return the cached snapshot, or None if absent or unreadable."""
        try:
            raw = self._medium.read(self._key)
        except StorageError as e:
            logger.debug("Ignoring unreadable session snapshot: %s", e)
            return None
        if raw is None:
            return None

        try:
            return SessionSnapshot.model_validate(raw)
        except PydanticValidationError as e:
            logger.debug("Ignoring corrupt session snapshot: %s", e)
            return None

    def clear(self) -> bool:
        """Drop the cached snapshot. Returns False if it could not be removed."""
        try:
            self._medium.delete(self._key)
        except StorageError as e:
            logger.warning("Failed to clear session snapshot: %s", e)
            return False
        return True
