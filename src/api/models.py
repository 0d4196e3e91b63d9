"""
Request and response models for the repo-chronicle API.

Article payloads use camelCase keys on the wire (``createdAt``,
``sourceActivityType``), matching the persisted collection.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.storage.schemas import Article, ArticleDraft, RepositoryRef


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str = Field(
        ...,
        description="Short error category",
    )
    message: str = Field(
        ...,
        description="User-facing error message",
    )


class GenerateErrorResponse(ErrorResponse):
    """Error envelope of the generation endpoint."""

    success: bool = False


class GenerateResponse(BaseModel):
    """Successful generation envelope."""

    success: bool = True
    data: ArticleDraft


class ArticleCreateRequest(_CamelModel):
    """Request model for saving a generated article."""

    title: str = Field(..., min_length=1, description="Article title")
    content: str = Field(..., description="Markdown body")
    created_at: datetime | None = Field(
        default=None,
        description="Generation time; defaults to now",
    )
    source_activity_type: str | None = Field(
        default=None,
        pattern="^(commit|pull_request|unknown)$",
        description="commit, pull_request or unknown",
    )
    repository: RepositoryRef | None = None

    def to_draft(self) -> ArticleDraft:
        return ArticleDraft(
            title=self.title,
            content=self.content,
            created_at=self.created_at,
            source_activity_type=self.source_activity_type,
            repository=self.repository,
        )


class ArticleListResponse(BaseModel):
    """Response model for listing articles."""

    articles: list[Article] = Field(default_factory=list)
    total: int = 0


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    deleted: bool


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or degraded",
    )
    version: str = Field(default="0.1.0")
    components: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-component status details",
    )
