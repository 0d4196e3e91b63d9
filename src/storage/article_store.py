"""Durable collection of generated articles.

The whole collection is stored as one JSON array (newest first) under a
single key of the key-value medium. Every operation reads the collection,
changes it in memory and writes it back. Concurrent writers are not
coordinated; the last write wins.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_snake

from src.errors import StorageError, ValidationError
from src.observability.metrics import get_metrics
from src.storage.kv import JsonFileStore
from src.storage.schemas import (
    IMMUTABLE_ARTICLE_FIELDS,
    Article,
    ArticleDraft,
    generate_article_id,
)

logger = logging.getLogger(__name__)

DEFAULT_ARTICLES_KEY = "articles"


def _readable(entries: list[Any]) -> list[Article]:
    return [entry for entry in entries if isinstance(entry, Article)]


class ArticleStore:
    """CRUD over the persisted article collection.

    Read failures degrade to empty results; write failures degrade to
    None/False, except ``save`` which raises so the caller knows the
    article was not kept.

    Args:
        medium: Key-value medium holding the collection.
        key: Key the collection is stored under.
    """

    def __init__(self, medium: JsonFileStore, key: str = DEFAULT_ARTICLES_KEY) -> None:
        self._medium = medium
        self._key = key
        self._metrics = get_metrics()

    def _load(self) -> list[Any]:
        """Read the collection in stored order.

        Records that fail validation are kept as their raw values so the
        next write puts them back unchanged.
        """
        try:
            raw = self._medium.read(self._key)
        except StorageError as e:
            logger.error("Failed to read article collection: %s", e)
            self._metrics.record_store_operation("read", "error")
            return []

        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.error(
                "Article collection has unexpected type %s; treating as empty",
                type(raw).__name__,
            )
            self._metrics.record_store_operation("read", "error")
            return []

        entries: list[Any] = []
        for index, item in enumerate(raw):
            try:
                entries.append(Article.model_validate(item))
            except PydanticValidationError as e:
                logger.warning("Skipping unreadable article at index %d: %s", index, e)
                entries.append(item)
        return entries

    def _persist(self, entries: list[Any]) -> None:
        self._medium.write(
            self._key,
            [entry.to_storage() if isinstance(entry, Article) else entry for entry in entries],
        )

    def list(self) -> list[Article]:
        """Return every readable stored article, newest first."""
        return _readable(self._load())

    def get(self, article_id: str) -> Article | None:
        """Return the article with ``article_id``, or None."""
        for article in _readable(self._load()):
            if article.id == article_id:
                return article
        return None

    def save(self, draft: ArticleDraft) -> Article:
        """Assign an identity to ``draft`` and persist it at the front.

        Args:
            draft: Generated article without an id.

        Returns:
            The stored article.

        Raises:
            StorageError: If the collection could not be written. Nothing is
                persisted in that case.
        """
        entries = self._load()
        existing_ids = {article.id for article in _readable(entries)}

        article_id = generate_article_id()
        while article_id in existing_ids:
            article_id = generate_article_id()

        article = Article(
            id=article_id,
            title=draft.title,
            content=draft.content,
            created_at=draft.created_at or datetime.now(timezone.utc),
            source_activity_type=draft.source_activity_type or "unknown",
            repository=draft.repository,
        )

        try:
            self._persist([article, *entries])
        except StorageError as e:
            logger.error("Failed to save article %s: %s", article_id, e)
            self._metrics.record_store_operation("save", "error")
            raise StorageError(
                str(e), user_message="The article could not be saved."
            ) from e

        self._metrics.record_store_operation("save", "ok")
        logger.info("Saved article %s (%s)", article.id, article.title)
        return article

    def update(self, article_id: str, fields: Mapping[str, Any]) -> Article | None:
        """Merge ``fields`` over a stored article and stamp ``updated_at``.

        Keys may be snake_case or camelCase. ``id`` and ``created_at`` are
        ignored.

        Returns:
            The updated article, or None if it does not exist or the write failed.

        Raises:
            ValidationError: Unknown field or invalid value. Raised before any write.
        """
        changes: dict[str, Any] = {}
        for key, value in fields.items():
            name = to_snake(key)
            if name in IMMUTABLE_ARTICLE_FIELDS:
                continue
            if name not in Article.model_fields:
                raise ValidationError(key, f"Unknown article field: {key}")
            changes[name] = value

        entries = self._load()
        for index, current in enumerate(entries):
            if isinstance(current, Article) and current.id == article_id:
                break
        else:
            self._metrics.record_store_operation("update", "missing")
            return None

        merged = current.model_dump()
        merged.update(changes)
        merged["updated_at"] = datetime.now(timezone.utc)
        try:
            updated = Article.model_validate(merged)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "article"
            raise ValidationError(field, error["msg"]) from e

        entries[index] = updated
        try:
            self._persist(entries)
        except StorageError as e:
            logger.error("Failed to update article %s: %s", article_id, e)
            self._metrics.record_store_operation("update", "error")
            return None

        self._metrics.record_store_operation("update", "ok")
        return updated

    def delete(self, article_id: str) -> bool:
        """Remove one article. True only if it existed and the write succeeded."""
        entries = self._load()
        remaining = [
            entry
            for entry in entries
            if not (isinstance(entry, Article) and entry.id == article_id)
        ]
        if len(remaining) == len(entries):
            self._metrics.record_store_operation("delete", "missing")
            return False

        try:
            self._persist(remaining)
        except StorageError as e:
            logger.error("Failed to delete article %s: %s", article_id, e)
            self._metrics.record_store_operation("delete", "error")
            return False

        self._metrics.record_store_operation("delete", "ok")
        logger.info("Deleted article %s", article_id)
        return True

    def clear(self) -> bool:
        """Empty the collection. False if the medium could not be written."""
        try:
            self._persist([])
        except StorageError as e:
            logger.error("Failed to clear article collection: %s", e)
            self._metrics.record_store_operation("clear", "error")
            return False

        self._metrics.record_store_operation("clear", "ok")
        logger.info("Cleared article collection")
        return True
