"""
Activity normalization and merge.

Turns raw GitHub commit and pull request payloads into the common
Activity sum type and produces one reverse-chronological timeline.

Each raw shape has its own parse function. Missing fields,
identity included, propagate as None; a record that is not a JSON object
or carries a field of the wrong type fails with ActivityShapeError.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.activity.schemas import (
    VALID_ACTIVITY_TYPES,
    Activity,
    BaseActivity,
    CommitActivity,
    PullRequestActivity,
)
from src.errors import ActivityShapeError, ValidationError

logger = logging.getLogger(__name__)

_ACTIVITY_ADAPTER: TypeAdapter[Activity] = TypeAdapter(Activity)

_PR_STATES = frozenset({"open", "closed"})


def _mapping(kind: str, value: Any, field: str) -> Mapping[str, Any]:
    """Return a nested object, treating None as empty."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ActivityShapeError(kind, field, f"expected an object, got {type(value).__name__}")
    return value


def _optional_str(kind: str, record: Mapping[str, Any], key: str, field: str) -> str | None:
    value = record.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ActivityShapeError(kind, field, f"expected a string, got {type(value).__name__}")


def parse_commit(raw: Any) -> CommitActivity:
    """Normalize one raw ``GET /repos/{owner}/{repo}/commits`` item.

    Args:
        raw: Commit payload as returned by the GitHub REST API.

    Returns:
        CommitActivity with sha, author name, author date, message and URL.

    Raises:
        ActivityShapeError: If the payload is not a commit-shaped object.
    """
    if not isinstance(raw, Mapping):
        raise ActivityShapeError("commit", "<record>", "expected a JSON object")

    commit = _mapping("commit", raw.get("commit"), "commit")
    author = _mapping("commit", commit.get("author"), "commit.author")

    return CommitActivity(
        id=_optional_str("commit", raw, "sha", "sha"),
        author=_optional_str("commit", author, "name", "commit.author.name"),
        date=_optional_str("commit", author, "date", "commit.author.date"),
        url=_optional_str("commit", raw, "html_url", "html_url"),
        message=_optional_str("commit", commit, "message", "commit.message"),
    )


def parse_pull_request(raw: Any) -> PullRequestActivity:
    """Normalize one raw ``GET /repos/{owner}/{repo}/pulls`` item.

    Args:
        raw: Pull request payload as returned by the GitHub REST API.

    Returns:
        PullRequestActivity keyed by the pull request's numeric id.

    Raises:
        ActivityShapeError: If the payload is not a pull-request-shaped object.
    """
    if not isinstance(raw, Mapping):
        raise ActivityShapeError("pull_request", "<record>", "expected a JSON object")

    pr_id = raw.get("id")
    if pr_id is not None and (isinstance(pr_id, bool) or not isinstance(pr_id, (int, str))):
        raise ActivityShapeError("pull_request", "id", "expected an integer or string id")

    number = raw.get("number")
    if number is not None and (isinstance(number, bool) or not isinstance(number, int)):
        raise ActivityShapeError("pull_request", "number", "expected an integer")

    state = raw.get("state")
    if state is not None and (not isinstance(state, str) or state not in _PR_STATES):
        raise ActivityShapeError("pull_request", "state", f"unknown state {state!r}")

    user = _mapping("pull_request", raw.get("user"), "user")

    return PullRequestActivity(
        id=None if pr_id is None else str(pr_id),
        number=number,
        title=_optional_str("pull_request", raw, "title", "title"),
        body=_optional_str("pull_request", raw, "body", "body"),
        author=_optional_str("pull_request", user, "login", "user.login"),
        date=_optional_str("pull_request", raw, "created_at", "created_at"),
        state=state,
        url=_optional_str("pull_request", raw, "html_url", "html_url"),
    )


def sort_activities(activities: Iterable[BaseActivity]) -> list[Activity]:
    """Sort activities most recent first.

    Python's sort is stable with ``reverse=True``, so activities with equal
    timestamps keep their input order. Missing or unparseable dates sort last.
    """
    return sorted(activities, key=lambda activity: activity.sort_key, reverse=True)


def merge(
    commits: Iterable[Any],
    pulls: Iterable[Any],
) -> list[Activity]:
    """Merge raw commits and pull requests into one descending timeline.

    Pure function of its inputs. Does not deduplicate: commits and pull
    requests never share an identity space.

    Args:
        commits: Raw commit payloads.
        pulls: Raw pull request payloads.

    Returns:
        Activities sorted by date, most recent first. Commits precede pull
        requests when timestamps are identical.
    """
    normalized: list[Activity] = [parse_commit(raw) for raw in commits]
    normalized.extend(parse_pull_request(raw) for raw in pulls)

    undated = sum(1 for activity in normalized if activity.timestamp is None)
    if undated:
        logger.warning("%d activities have no parseable date; sorting them last", undated)

    return sort_activities(normalized)


def activity_from_payload(payload: Mapping[str, Any]) -> Activity:
    """Coerce a flat ``{type, id, ...}`` mapping into an Activity.

    Used for generation requests, whose body is an already-normalized
    activity rather than a raw GitHub payload.

    Raises:
        ValidationError: If the type is missing/unknown or a field is invalid.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("activity", "Activity data is required")

    activity_type = payload.get("type")
    if not activity_type:
        raise ValidationError("type", "Activity type is required (commit or pull_request)")
    if not isinstance(activity_type, str) or activity_type not in VALID_ACTIVITY_TYPES:
        raise ValidationError(
            "type",
            'Invalid activity type. Must be "commit" or "pull_request"',
        )

    data = dict(payload)
    if isinstance(data.get("id"), int) and not isinstance(data.get("id"), bool):
        data["id"] = str(data["id"])

    try:
        return _ACTIVITY_ADAPTER.validate_python(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"][1:]) or "activity"
        raise ValidationError(field, first["msg"]) from e
