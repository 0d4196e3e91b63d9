"""
Canonical activity schema for the repository timeline.

An Activity is one normalized timeline entry: either a commit or a pull
request. Both variants share identity, author, date and URL fields and are
discriminated by ``type``. Instances are immutable once constructed.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

ActivityType = Literal["commit", "pull_request"]

VALID_ACTIVITY_TYPES: frozenset[str] = frozenset({"commit", "pull_request"})

# Sort position for activities whose date is missing or unparseable
OLDEST_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) to aware UTC.

    Returns None for missing or unparseable values instead of raising.
    Naive timestamps are read as UTC.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # Offsets near datetime.min/max overflow on UTC conversion
        return None


class BaseActivity(BaseModel):
    """Fields common to every timeline entry."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, description="Commit SHA or pull request id as string")
    author: str | None = Field(default=None, description="Author name or login")
    date: str | None = Field(
        default=None,
        description="ISO-8601 timestamp as received from the remote API",
    )
    url: str | None = Field(default=None, description="External HTML URL")

    @property
    def timestamp(self) -> datetime | None:
        """Parsed ``date`` or None when missing/unparseable."""
        return parse_timestamp(self.date)

    @property
    def sort_key(self) -> datetime:
        """Timestamp used for ordering; unparseable dates sort as oldest."""
        return self.timestamp or OLDEST_TIMESTAMP


class CommitActivity(BaseActivity):
    """A commit on the repository's default branch."""

    type: Literal["commit"] = "commit"
    message: str | None = Field(default=None, description="Full commit message")

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        if not self.message:
            return ""
        return self.message.splitlines()[0].strip()


class PullRequestActivity(BaseActivity):
    """A pull request opened against the repository."""

    type: Literal["pull_request"] = "pull_request"
    number: int | None = Field(default=None, description="Pull request number")
    title: str | None = None
    body: str | None = Field(default=None, description="Description; absent/empty is valid")
    state: Literal["open", "closed"] | None = None


Activity = Annotated[
    Union[CommitActivity, PullRequestActivity],
    Field(discriminator="type"),
]
