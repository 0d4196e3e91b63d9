"""Repository history endpoints: commits, pull requests and merged activity."""

import time
from typing import Any, Literal

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_history_client, get_session_cache
from src.observability.logging import bind_repository
from src.api.models import ErrorResponse
from src.errors import ChronicleError, RemoteError, ValidationError
from src.history.client import GitHubHistoryClient
from src.storage.schemas import RepositoryRef, SessionSnapshot
from src.storage.session_cache import SessionCache

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/github")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid repository or parameters"},
    404: {"model": ErrorResponse, "description": "Repository not found"},
    502: {"model": ErrorResponse, "description": "Remote API unreachable"},
}


def _error_response(exc: ChronicleError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation Error", "message": exc.reason},
        )
    if isinstance(exc, RemoteError):
        return JSONResponse(
            status_code=exc.status,
            content={"error": "GitHub API Error", "message": exc.message},
        )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": "GitHub API Error", "message": exc.user_message},
    )


@router.get(
    "/activity/{owner}/{repo}",
    responses=_ERROR_RESPONSES,
    summary="Get merged activity",
    description=(
        "Fetch recent commits and pull requests concurrently and return them "
        "as one timeline, newest first."
    ),
)
async def get_activity(
    owner: str,
    repo: str,
    per_page: int | None = Query(default=None, description="Items per source (1-100)"),
    client: GitHubHistoryClient = Depends(get_history_client),
    cache: SessionCache = Depends(get_session_cache),
):
    bind_repository(owner, repo)
    start_time = time.perf_counter()
    try:
        activities = await client.fetch_activity(owner, repo, per_page=per_page)
    except ChronicleError as e:
        logger.warning("get_activity_failed", owner=owner, repo=repo, error=str(e))
        return _error_response(e)

    logger.info(
        "Activity fetched",
        owner=owner,
        repo=repo,
        count=len(activities),
        latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    cache.save(
        SessionSnapshot(
            repository=RepositoryRef(owner=owner, name=repo),
            activities=activities,
        )
    )
    return [activity.model_dump(mode="json") for activity in activities]


@router.get(
    "/commits/{owner}/{repo}",
    responses=_ERROR_RESPONSES,
    summary="Get recent commits",
    description="Raw commit objects as returned by GitHub.",
)
async def get_commits(
    owner: str,
    repo: str,
    per_page: int | None = Query(default=None, description="Items per page (1-100)"),
    client: GitHubHistoryClient = Depends(get_history_client),
):
    try:
        return await client.fetch_commits(owner, repo, per_page=per_page)
    except ChronicleError as e:
        logger.warning("get_commits_failed", owner=owner, repo=repo, error=str(e))
        return _error_response(e)


@router.get(
    "/pulls/{owner}/{repo}",
    responses=_ERROR_RESPONSES,
    summary="Get recent pull requests",
    description="Raw pull request objects as returned by GitHub.",
)
async def get_pulls(
    owner: str,
    repo: str,
    state: Literal["open", "closed", "all"] = Query(default="all"),
    per_page: int | None = Query(default=None, description="Items per page (1-100)"),
    client: GitHubHistoryClient = Depends(get_history_client),
):
    try:
        return await client.fetch_pull_requests(owner, repo, state=state, per_page=per_page)
    except ChronicleError as e:
        logger.warning("get_pulls_failed", owner=owner, repo=repo, error=str(e))
        return _error_response(e)
