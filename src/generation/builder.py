"""Prompt building for article generation.

Validates one activity and renders the prompt for its variant. Validation
happens before any remote call so an invalid request never costs a
generation.
"""

from collections.abc import Mapping
from typing import Any

from src.activity.merger import activity_from_payload
from src.activity.schemas import Activity, CommitActivity, PullRequestActivity
from src.errors import ValidationError
from src.generation.prompts import (
    COMMIT_PROMPT,
    FORMAT_REQUIREMENTS,
    NO_DESCRIPTION,
    PULL_REQUEST_PROMPT,
)

UNKNOWN = "unknown"


class GenerationRequestBuilder:
    """Builds deterministic prompts from timeline activities.

    Accepts either an Activity model or a flat ``{type, ...}`` mapping such
    as a generation request body.
    """

    def validate(self, activity: Activity | Mapping[str, Any]) -> Activity:
        """Check an activity can be turned into a prompt.

        Returns:
            The activity as a model.

        Raises:
            ValidationError: Unknown type, empty commit message or empty PR title.
        """
        if isinstance(activity, Mapping):
            activity = activity_from_payload(activity)

        if isinstance(activity, CommitActivity):
            if not activity.message or not activity.message.strip():
                raise ValidationError("message", "Commit message is required for commit type")
        elif isinstance(activity, PullRequestActivity):
            if not activity.title or not activity.title.strip():
                raise ValidationError("title", "PR title is required for pull_request type")
        else:
            raise ValidationError(
                "type",
                'Invalid activity type. Must be "commit" or "pull_request"',
            )
        return activity

    def build_prompt(self, activity: Activity | Mapping[str, Any]) -> str:
        """Render the generation prompt for one activity.

        Args:
            activity: Commit or pull request activity.

        Returns:
            Prompt text; identical input always yields identical output.

        Raises:
            ValidationError: If the activity fails validation.
        """
        activity = self.validate(activity)

        if isinstance(activity, CommitActivity):
            return COMMIT_PROMPT.format(
                message=activity.message.strip(),
                author=activity.author or UNKNOWN,
                date=activity.date or UNKNOWN,
                format_requirements=FORMAT_REQUIREMENTS,
            )

        body = (activity.body or "").strip() or NO_DESCRIPTION
        return PULL_REQUEST_PROMPT.format(
            title=activity.title.strip(),
            body=body,
            author=activity.author or UNKNOWN,
            date=activity.date or UNKNOWN,
            state=activity.state or UNKNOWN,
            format_requirements=FORMAT_REQUIREMENTS,
        )
