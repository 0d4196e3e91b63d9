"""Repository activity timeline: commits and pull requests as one sum type.

Components:
- CommitActivity / PullRequestActivity: Immutable timeline entries
- parse_commit / parse_pull_request: Per-shape normalization of raw GitHub payloads
- merge: Stable, reverse-chronological merge of both record lists
"""

from src.activity.merger import (
    activity_from_payload,
    merge,
    parse_commit,
    parse_pull_request,
    sort_activities,
)
from src.activity.schemas import (
    VALID_ACTIVITY_TYPES,
    Activity,
    CommitActivity,
    PullRequestActivity,
    parse_timestamp,
)

__all__ = [
    "Activity",
    "CommitActivity",
    "PullRequestActivity",
    "VALID_ACTIVITY_TYPES",
    "activity_from_payload",
    "merge",
    "parse_commit",
    "parse_pull_request",
    "parse_timestamp",
    "sort_activities",
]
