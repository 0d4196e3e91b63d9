"""Article generation endpoint."""

import time
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from src.api.dependencies import get_generation_service
from src.api.models import GenerateErrorResponse, GenerateResponse
from src.errors import (
    ChronicleError,
    ConfigurationError,
    ThrottlingError,
    ValidationError,
)
from src.generation.service import GenerationService
from src.storage.schemas import RepositoryRef

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/blog")


def _failure(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


def _error_response(exc: ChronicleError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _failure(status.HTTP_400_BAD_REQUEST, "Validation Error", exc.reason)
    if isinstance(exc, ConfigurationError):
        return _failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "API Configuration Error",
            exc.user_message,
        )
    if isinstance(exc, ThrottlingError):
        return _failure(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Rate Limit Exceeded",
            exc.user_message,
        )
    return _failure(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        exc.user_message,
    )


def _repository_of(payload: dict[str, Any]) -> RepositoryRef | None:
    raw = payload.get("repository")
    if raw is None:
        return None
    try:
        return RepositoryRef.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError("repository", "Repository must have owner and repo") from e


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": GenerateErrorResponse, "description": "Invalid activity"},
        429: {"model": GenerateErrorResponse, "description": "Generation quota exceeded"},
        500: {"model": GenerateErrorResponse, "description": "Configuration or generation failure"},
    },
    summary="Generate an article",
    description=(
        "Generate a technical article from one commit or pull request. "
        "The body is a flat activity: type, id, message or title, body, "
        "author, date, url, and optionally repository {owner, repo}."
    ),
)
async def generate_article(
    payload: dict[str, Any] | None = Body(default=None),
    service: GenerationService = Depends(get_generation_service),
):
    start_time = time.perf_counter()

    try:
        if not payload:
            raise ValidationError("activity", "Activity data is required")
        repository = _repository_of(payload)
        activity = {key: value for key, value in payload.items() if key != "repository"}
        draft = await service.generate(activity, repository=repository)
    except ChronicleError as e:
        logger.error(
            "generate_article_failed",
            error_type=type(e).__name__,
            error=str(e),
        )
        return _error_response(e)
    except Exception as e:
        logger.error("generate_article_failed", error=str(e), exc_info=True)
        return _failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "Failed to generate the article.",
        )

    logger.info(
        "Article generated",
        title=draft.title,
        activity_type=draft.source_activity_type,
        latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    return GenerateResponse(data=draft)
