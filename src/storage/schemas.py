"""Schema definitions for persisted articles and the session snapshot.

Articles are stored as one JSON array under a fixed key; the session
snapshot is one JSON object under a second key. On-medium and wire keys
are camelCase (``createdAt``, ``sourceActivityType``) while Python code
uses snake_case attributes.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.activity.schemas import Activity

SourceActivityType = Literal["commit", "pull_request", "unknown"]

# Field names the store never lets an update change
IMMUTABLE_ARTICLE_FIELDS: frozenset[str] = frozenset({"id", "created_at"})


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def generate_article_id() -> str:
    """Time-based component plus random component: article_{epoch_ms}_{9 hex}."""
    return f"article_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RepositoryRef(_CamelModel):
    """Provenance snapshot of a repository; not a live reference."""

    owner: str
    name: str = Field(validation_alias=AliasChoices("name", "repo"))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class ArticleDraft(_CamelModel):
    """An article before the store assigns its identity.

    Produced by the response parser and accepted by ArticleStore.save.
    """

    title: str
    content: str
    created_at: datetime | None = None
    source_activity_type: SourceActivityType | None = None
    repository: RepositoryRef | None = None


class Article(_CamelModel):
    """A persisted generated article.

    Attributes:
        id: Unique identifier assigned at creation, never reused.
        title: Title derived from the generated text.
        content: Full generated body in Markdown.
        created_at: Generation time; immutable.
        updated_at: Set only by an explicit update.
        source_activity_type: Provenance: commit, pull_request or unknown.
        repository: Optional provenance snapshot of the source repository.
    """

    id: str
    title: str
    content: str
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime | None = None
    source_activity_type: SourceActivityType = "unknown"
    repository: RepositoryRef | None = None

    def to_storage(self) -> dict[str, Any]:
        """Serialize to the on-medium/wire shape."""
        return self.model_dump(mode="json", by_alias=True)


class SessionSnapshot(BaseModel):
    """The last successfully fetched timeline for one repository."""

    repository: RepositoryRef
    activities: list[Activity] = Field(default_factory=list)

    def to_storage(self) -> dict[str, Any]:
        """Serialize as ``{activities, repository: {owner, repo}}``."""
        return {
            "activities": [
                activity.model_dump(mode="json") for activity in self.activities
            ],
            "repository": {
                "owner": self.repository.owner,
                "repo": self.repository.name,
            },
        }
