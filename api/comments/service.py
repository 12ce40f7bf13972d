"""
Comment business logic.

Every operation gates on the referenced row first so an unknown article,
user, or comment is reported as its own 404 instead of an empty result or a
foreign-key error.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from articles import repository as articles_repository
from articles import service as articles_service
from core import errors, validation
from core.existence import ensure_exists, with_existence_check
from users import repository as users_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


async def list_comments(article_id: int) -> list[schemas.CommentOut]:
    async def _fetch(article: dict[str, Any]) -> list[dict[str, Any]]:
        return await repository.list_comments_for_article(article["article_id"])

    if not validation.fits_int4(article_id):
        raise errors.ArticleNotFound()
    rows = await with_existence_check(
        articles_repository.get_article(article_id),
        _fetch,
        errors.ArticleNotFound(),
    )
    return [schemas.CommentOut(**row) for row in rows]


def parse_comment_create(payload: Any) -> schemas.CommentCreate:
    """
    Validate a POST body. Body problems are reported before author problems.
    """
    try:
        return schemas.CommentCreate.model_validate(payload)
    except ValidationError as exc:
        fields = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        if "body" in fields or not fields:
            raise errors.InvalidCommentBody() from exc
        raise errors.InvalidCommentAuthor() from exc


async def create_comment(article_id: int, payload: Any) -> schemas.CommentOut:
    comment = parse_comment_create(payload)

    await articles_service.require_article(article_id)
    await ensure_exists(users_repository.get_user(comment.author), errors.UserNotFound())

    row = await repository.insert_comment(
        article_id=article_id,
        author=comment.author,
        body=comment.body,
    )
    logger.info("comment_created comment_id=%s article_id=%s", row["comment_id"], article_id)
    return schemas.CommentOut(**row)


async def delete_comment(comment_id: int) -> None:
    if not validation.fits_int4(comment_id):
        raise errors.CommentNotFound()
    await ensure_exists(repository.get_comment(comment_id), errors.CommentNotFound())

    if not await repository.delete_comment(comment_id):
        raise errors.CommentNotFound()
    logger.info("comment_deleted comment_id=%s", comment_id)
