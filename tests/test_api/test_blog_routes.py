"""Tests for the article generation endpoint."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_generation_service
from src.errors import (
    ConfigurationError,
    GenerationFailedError,
    ThrottlingError,
    ValidationError,
)
from src.generation.builder import GenerationRequestBuilder
from src.generation.service import GenerationService
from src.storage.schemas import ArticleDraft

COMMIT_BODY = {
    "type": "commit",
    "id": "a1b2c3d",
    "message": "Fix race in cache invalidation",
    "author": "Ada Lovelace",
    "date": "2024-03-02T10:00:00Z",
    "url": "https://github.com/octocat/hello-world/commit/a1b2c3d",
}


def _make_draft(**kwargs) -> ArticleDraft:
    return ArticleDraft(
        title=kwargs.pop("title", "Taming cache races"),
        content=kwargs.pop("content", "# Taming cache races\n\nBody."),
        created_at=datetime(2024, 3, 2, 12, 0, 0, tzinfo=timezone.utc),
        source_activity_type=kwargs.pop("source_activity_type", "commit"),
        **kwargs,
    )


@pytest.fixture
def mock_service():
    """Mock GenerationService that validates like the real one."""
    service = AsyncMock(spec=GenerationService)
    builder = GenerationRequestBuilder()

    async def generate(activity, repository=None):
        builder.validate(activity)
        return _make_draft(repository=repository)

    service.generate = AsyncMock(side_effect=generate)
    return service


@pytest.fixture
def client(mock_service):
    """FastAPI TestClient with dependency overrides for generation."""
    app = create_app()

    app.dependency_overrides[get_generation_service] = lambda: mock_service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


class TestGenerateSuccess:
    def test_returns_draft(self, client):
        resp = client.post("/api/blog/generate", json=COMMIT_BODY)

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["data"]["title"] == "Taming cache races"
        assert data["data"]["content"].startswith("# Taming cache races")
        assert data["data"]["createdAt"].startswith("2024-03-02T12:00:00")

    def test_repository_provenance_forwarded(self, client, mock_service):
        body = {**COMMIT_BODY, "repository": {"owner": "octocat", "repo": "hello-world"}}

        resp = client.post("/api/blog/generate", json=body)

        assert resp.status_code == 200
        repository = mock_service.generate.call_args.kwargs["repository"]
        assert repository.full_name == "octocat/hello-world"
        assert "repository" not in mock_service.generate.call_args.args[0]


class TestGenerateValidation:
    @pytest.mark.parametrize(
        "body,message",
        [
            ({"id": "x", "message": "m"}, "Activity type is required (commit or pull_request)"),
            ({"type": "issue", "id": "x"}, 'Invalid activity type. Must be "commit" or "pull_request"'),
            ({"type": "commit", "id": "x", "message": ""}, "Commit message is required for commit type"),
            ({"type": "pull_request", "id": "1", "title": "  "}, "PR title is required for pull_request type"),
        ],
    )
    def test_invalid_activity(self, client, body, message):
        resp = client.post("/api/blog/generate", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Validation Error", "message": message}

    def test_missing_body(self, client):
        resp = client.post("/api/blog/generate")

        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_invalid_repository(self, client):
        resp = client.post("/api/blog/generate", json={**COMMIT_BODY, "repository": {"owner": "x"}})
        assert resp.status_code == 400


class TestGenerateFailures:
    def test_configuration_error(self, client, mock_service):
        mock_service.generate.side_effect = ConfigurationError("no key")

        resp = client.post("/api/blog/generate", json=COMMIT_BODY)

        assert resp.status_code == 500
        assert resp.json()["error"] == "API Configuration Error"
        assert resp.json()["success"] is False

    def test_throttling_error(self, client, mock_service):
        mock_service.generate.side_effect = ThrottlingError("quota exceeded")

        resp = client.post("/api/blog/generate", json=COMMIT_BODY)

        assert resp.status_code == 429
        assert resp.json()["error"] == "Rate Limit Exceeded"

    def test_generic_failure(self, client, mock_service):
        mock_service.generate.side_effect = GenerationFailedError("boom")

        resp = client.post("/api/blog/generate", json=COMMIT_BODY)

        assert resp.status_code == 500
        assert resp.json()["error"] == "Internal Server Error"

    def test_unexpected_exception(self, client, mock_service):
        mock_service.generate.side_effect = RuntimeError("unexpected")

        resp = client.post("/api/blog/generate", json=COMMIT_BODY)

        assert resp.status_code == 500
        assert resp.json()["success"] is False

    def test_validation_from_service(self, client, mock_service):
        mock_service.generate.side_effect = ValidationError("state", "Input should be 'open' or 'closed'")

        resp = client.post("/api/blog/generate", json=COMMIT_BODY)

        assert resp.status_code == 400
