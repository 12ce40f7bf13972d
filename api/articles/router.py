"""
Article API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Query

from core import validation

from . import service

router = APIRouter()


@router.get("/api/articles")
async def get_articles(
    sort_by: str | None = Query(default=validation.DEFAULT_SORT),
    order: str | None = Query(default=validation.DEFAULT_ORDER),
    topic: str | None = Query(default=None),
) -> dict:
    articles = await service.list_articles(sort_by=sort_by, order=order, topic=topic)
    return {"articles": articles}


@router.get("/api/articles/{article_id}")
async def get_article_by_id(article_id: str) -> dict:
    article = await service.get_article(validation.parse_resource_id(article_id, "article_id"))
    return {"article": article}


@router.patch("/api/articles/{article_id}")
async def patch_article_votes(article_id: str, payload: Any = Body(default=None)) -> dict:
    """
    Body: {"inc_votes": <whole number>}. Extra keys are ignored.
    """
    article = await service.increment_votes(
        validation.parse_resource_id(article_id, "article_id"),
        payload,
    )
    return {"article": article}
