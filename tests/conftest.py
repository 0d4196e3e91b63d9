"""Pytest fixtures for repo-chronicle tests."""

import pytest

from src.activity.schemas import CommitActivity, PullRequestActivity
from src.config.settings import Settings
from src.storage.article_store import ArticleStore
from src.storage.kv import JsonFileStore
from src.storage.session_cache import SessionCache


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        github_api_base="https://api.github.test",
        github_token="ghp_test",
        data_dir=str(tmp_path / "data"),
    )


@pytest.fixture
def commit_activity() -> CommitActivity:
    return CommitActivity(
        id="a1b2c3d",
        message="Fix race in cache invalidation\n\nThe TTL check ran after the read.",
        author="Ada Lovelace",
        date="2024-03-02T10:00:00Z",
        url="https://github.com/octocat/hello-world/commit/a1b2c3d",
    )


@pytest.fixture
def pr_activity() -> PullRequestActivity:
    return PullRequestActivity(
        id="1001",
        number=7,
        title="Add retry policy",
        body="Adds exponential backoff.",
        author="grace",
        date="2024-03-01T09:00:00Z",
        state="closed",
        url="https://github.com/octocat/hello-world/pull/7",
    )


@pytest.fixture
def medium(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "store")


@pytest.fixture
def article_store(medium) -> ArticleStore:
    return ArticleStore(medium)


@pytest.fixture
def session_cache(medium) -> SessionCache:
    return SessionCache(medium)
