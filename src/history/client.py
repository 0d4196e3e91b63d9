"""
GitHub history client.

Fetches raw commit and pull request records for one repository from the
GitHub REST API, and offers a merged timeline built by the activity merger.

Only a single page of results is requested; pagination is out of scope.
Failures are never retried: non-2xx responses surface as RemoteError with
the remote status and message, and are re-raised unchanged to the caller.
"""

import asyncio
import logging
from typing import Any, Literal

import httpx

from src.activity.merger import merge
from src.activity.schemas import Activity
from src.config.settings import Settings, get_settings
from src.errors import RemoteError, ValidationError
from src.history.http_client import HTTPClient
from src.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

PullRequestState = Literal["open", "closed", "all"]

MIN_PER_PAGE = 1
MAX_PER_PAGE = 100


def clamp_per_page(per_page: int | None, default: int) -> int:
    """Clamp a page size to what the GitHub API accepts for one page."""
    if per_page is None:
        per_page = default
    return max(MIN_PER_PAGE, min(MAX_PER_PAGE, int(per_page)))


def _require_repository(owner: str, repo: str) -> None:
    if not owner or not owner.strip():
        raise ValidationError("owner", "Repository owner is required")
    if not repo or not repo.strip():
        raise ValidationError("repo", "Repository name is required")


class GitHubHistoryClient:
    """
    Client for a repository's recent commits and pull requests.

    Each public call opens a short-lived HTTP session; ``fetch_activity``
    shares one session between its two concurrent requests.

    Args:
        settings: Application settings. Defaults to get_settings().
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._metrics = get_metrics()

    @property
    def api_base(self) -> str:
        return self._settings.github_api_base.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self._settings.github_api_version,
        }
        if self._settings.github_token:
            headers["Authorization"] = f"Bearer {self._settings.github_token}"
        return headers

    def _session(self) -> HTTPClient:
        return HTTPClient(
            headers=self._headers(),
            timeout=self._settings.http_timeout_seconds,
            transport=self._transport,
        )

    async def _get_list(
        self,
        http: HTTPClient,
        endpoint: str,
        url: str,
        params: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """GET one page and require a JSON array in return."""
        try:
            payload = await http.get_json(url, params=params)
        except RemoteError as e:
            self._metrics.record_remote_request(endpoint, e.status)
            raise

        self._metrics.record_remote_request(endpoint, 200)
        if not isinstance(payload, list):
            raise RemoteError(502, f"Expected a list from {endpoint}, got {type(payload).__name__}")
        return payload

    async def _fetch_commits(
        self,
        http: HTTPClient,
        owner: str,
        repo: str,
        per_page: int,
    ) -> list[dict[str, Any]]:
        return await self._get_list(
            http,
            "commits",
            f"{self.api_base}/repos/{owner}/{repo}/commits",
            {"per_page": per_page},
        )

    async def _fetch_pull_requests(
        self,
        http: HTTPClient,
        owner: str,
        repo: str,
        state: PullRequestState,
        per_page: int,
    ) -> list[dict[str, Any]]:
        return await self._get_list(
            http,
            "pulls",
            f"{self.api_base}/repos/{owner}/{repo}/pulls",
            {"state": state, "per_page": per_page},
        )

    async def fetch_commits(
        self,
        owner: str,
        repo: str,
        per_page: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch the most recent commits as raw GitHub payloads.

        Args:
            owner: Repository owner
            repo: Repository name
            per_page: Page size (1-100, default from settings)

        Returns:
            Raw commit objects

        Raises:
            ValidationError: If owner or repo is empty
            RemoteError: On any non-2xx response
        """
        _require_repository(owner, repo)
        size = clamp_per_page(per_page, self._settings.default_per_page)
        async with self._session() as http:
            return await self._fetch_commits(http, owner, repo, size)

    async def fetch_pull_requests(
        self,
        owner: str,
        repo: str,
        state: PullRequestState = "all",
        per_page: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch the most recent pull requests as raw GitHub payloads.

        Args:
            owner: Repository owner
            repo: Repository name
            state: open, closed or all
            per_page: Page size (1-100, default from settings)

        Returns:
            Raw pull request objects

        Raises:
            ValidationError: If owner or repo is empty, or state is unknown
            RemoteError: On any non-2xx response
        """
        _require_repository(owner, repo)
        if state not in ("open", "closed", "all"):
            raise ValidationError("state", "State must be one of: open, closed, all")
        size = clamp_per_page(per_page, self._settings.default_per_page)
        async with self._session() as http:
            return await self._fetch_pull_requests(http, owner, repo, state, size)

    async def fetch_activity(
        self,
        owner: str,
        repo: str,
        per_page: int | None = None,
    ) -> list[Activity]:
        """
        Fetch commits and pull requests concurrently and merge them.

        Both requests must succeed; if either fails the whole fetch fails
        and no partial timeline is produced.

        Args:
            owner: Repository owner
            repo: Repository name
            per_page: Page size for each of the two requests

        Returns:
            Activities sorted by date, most recent first

        Raises:
            ValidationError: If owner or repo is empty
            RemoteError: If either remote call fails
        """
        _require_repository(owner, repo)
        size = clamp_per_page(per_page, self._settings.default_per_page)

        # Wait for both before closing the session; the first failure wins
        async with self._session() as http:
            commits, pulls = await asyncio.gather(
                self._fetch_commits(http, owner, repo, size),
                self._fetch_pull_requests(http, owner, repo, "all", size),
                return_exceptions=True,
            )

        for result in (commits, pulls):
            if isinstance(result, BaseException):
                raise result

        activities = merge(commits, pulls)

        self._metrics.record_activities("commit", len(commits))
        self._metrics.record_activities("pull_request", len(pulls))
        logger.info(
            "Fetched %d activities for %s/%s (%d commits, %d pull requests)",
            len(activities),
            owner,
            repo,
            len(commits),
            len(pulls),
        )
        return activities
