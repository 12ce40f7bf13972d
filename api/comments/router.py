"""
Comment API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Response, status

from core import validation

from . import service

router = APIRouter()


@router.get("/api/articles/{article_id}/comments")
async def get_article_comments(article_id: str) -> dict:
    comments = await service.list_comments(validation.parse_resource_id(article_id, "article_id"))
    return {"comments": comments}


@router.post("/api/articles/{article_id}/comments", status_code=status.HTTP_201_CREATED)
async def post_article_comment(article_id: str, payload: Any = Body(default=None)) -> dict:
    """
    Body: {"username": str, "body": str}.
    """
    comment = await service.create_comment(
        validation.parse_resource_id(article_id, "article_id"),
        payload,
    )
    return {"comment": comment}


@router.delete("/api/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: str) -> Response:
    await service.delete_comment(validation.parse_resource_id(comment_id, "comment_id"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
