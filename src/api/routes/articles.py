"""Saved article endpoints over the local article store."""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, status

from src.api.dependencies import get_article_store
from src.api.models import (
    ArticleCreateRequest,
    ArticleListResponse,
    DeleteResponse,
)
from src.errors import StorageError, ValidationError
from src.storage.article_store import ArticleStore
from src.storage.schemas import Article

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/articles")


@router.get(
    "",
    response_model=ArticleListResponse,
    summary="List saved articles",
    description="All saved articles, newest first.",
)
async def list_articles(
    store: ArticleStore = Depends(get_article_store),
) -> ArticleListResponse:
    articles = store.list()
    return ArticleListResponse(articles=articles, total=len(articles))


@router.post(
    "",
    response_model=Article,
    status_code=status.HTTP_201_CREATED,
    summary="Save an article",
)
async def create_article(
    request: ArticleCreateRequest,
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    try:
        article = store.save(request.to_draft())
    except StorageError as e:
        logger.error("create_article_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.user_message,
        )

    logger.info("Article saved", article_id=article.id, title=article.title)
    return article


@router.delete(
    "",
    response_model=DeleteResponse,
    summary="Delete all articles",
)
async def clear_articles(
    store: ArticleStore = Depends(get_article_store),
) -> DeleteResponse:
    if not store.clear():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear articles",
        )
    return DeleteResponse(deleted=True)


@router.get(
    "/{article_id}",
    response_model=Article,
    summary="Get one article",
)
async def get_article(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    article = store.get(article_id)
    if article is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Article {article_id!r} not found",
        )
    return article


@router.patch(
    "/{article_id}",
    response_model=Article,
    summary="Update an article",
    description="Merge fields over a saved article. id and createdAt cannot change.",
)
async def update_article(
    article_id: str,
    fields: dict[str, Any] = Body(...),
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    try:
        updated = store.update(article_id, fields)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.reason,
        )

    if updated is None:
        if store.get(article_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Article {article_id!r} not found",
            )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update article",
        )
    return updated


@router.delete(
    "/{article_id}",
    response_model=DeleteResponse,
    summary="Delete one article",
)
async def delete_article(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> DeleteResponse:
    if not store.delete(article_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Article {article_id!r} not found",
        )
    return DeleteResponse(deleted=True)
