"""Local persistence for generated articles and the session snapshot."""

from src.storage.article_store import ArticleStore
from src.storage.kv import JsonFileStore
from src.storage.schemas import (
    Article,
    ArticleDraft,
    RepositoryRef,
    SessionSnapshot,
    generate_article_id,
)
from src.storage.session_cache import SessionCache

__all__ = [
    "Article",
    "ArticleDraft",
    "ArticleStore",
    "JsonFileStore",
    "RepositoryRef",
    "SessionCache",
    "SessionSnapshot",
    "generate_article_id",
]
