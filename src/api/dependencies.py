"""
Dependency injection for FastAPI endpoints.
"""

from src.config.settings import get_settings
from src.generation.config import GenerationConfig
from src.generation.service import GenerationService
from src.history.client import GitHubHistoryClient
from src.storage.article_store import ArticleStore
from src.storage.kv import JsonFileStore
from src.storage.session_cache import SessionCache

# Global service instances (initialized on first request)
_history_client: GitHubHistoryClient | None = None
_generation_service: GenerationService | None = None
_medium: JsonFileStore | None = None
_article_store: ArticleStore | None = None
_session_cache: SessionCache | None = None


def _get_medium() -> JsonFileStore:
    global _medium

    if _medium is None:
        settings = get_settings()
        _medium = JsonFileStore(settings.data_dir)

    return _medium


async def get_history_client() -> GitHubHistoryClient:
    """Get the GitHub history client instance."""
    global _history_client

    if _history_client is None:
        _history_client = GitHubHistoryClient(settings=get_settings())

    return _history_client


async def get_generation_service() -> GenerationService:
    """
    Get article generation service instance.

    Creates a singleton service configured from GENERATION_* variables.
    The SDK clients themselves are only created on the first generation.
    """
    global _generation_service

    if _generation_service is None:
        _generation_service = GenerationService(config=GenerationConfig())

    return _generation_service


async def get_article_store() -> ArticleStore:
    """Get the article store backed by the local data directory."""
    global _article_store

    if _article_store is None:
        settings = get_settings()
        _article_store = ArticleStore(_get_medium(), key=settings.articles_key)

    return _article_store


async def get_session_cache() -> SessionCache:
    """Get the session snapshot cache backed by the local data directory."""
    global _session_cache

    if _session_cache is None:
        settings = get_settings()
        _session_cache = SessionCache(_get_medium(), key=settings.session_key)

    return _session_cache


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _history_client, _generation_service, _medium, _article_store, _session_cache

    _history_client = None
    _article_store = None
    _session_cache = None
    _medium = None

    if _generation_service is not None:
        await _generation_service.close()
        _generation_service = None
