"""
Health check endpoint.
"""

import structlog
from fastapi import APIRouter, Depends

from src.api.dependencies import get_article_store, get_generation_service
from src.api.models import HealthResponse
from src.config.settings import get_settings
from src.generation.service import GenerationService
from src.storage.article_store import ArticleStore

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health",
    description="Reports whether generation and GitHub credentials are configured and the article store is readable.",
)
async def health_check(
    service: GenerationService = Depends(get_generation_service),
    store: ArticleStore = Depends(get_article_store),
) -> HealthResponse:
    settings = get_settings()

    generation = {
        "configured": service.is_configured,
        "provider": service.config.provider,
        "model": service.config.model_name,
    }
    github = {
        "authenticated": settings.github_configured,
        "api_base": settings.github_api_base,
    }
    storage = {"articles": len(store.list())}

    status = "healthy" if service.is_configured else "degraded"
    if status != "healthy":
        logger.debug("Health degraded", reason="generation not configured")

    return HealthResponse(
        status=status,
        components={
            "generation": generation,
            "github": github,
            "storage": storage,
        },
    )
