"""
Article business logic.

Scope:
- listing with validated sort/order and an optional topic filter
- single-article lookup
- vote increments
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from core import errors, validation
from core.existence import ensure_exists
from topics import repository as topics_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


async def list_articles(
    sort_by: str | None = validation.DEFAULT_SORT,
    order: str | None = validation.DEFAULT_ORDER,
    topic: str | None = None,
) -> list[schemas.ArticleSummary]:
    # All parameter checks run before the first query.
    sort_by = validation.validate_sort(sort_by)
    order = validation.validate_order(order)
    topic = validation.validate_topic_token(topic)

    if topic is not None:
        # Unknown topic is a 404; a known topic without articles is [].
        await ensure_exists(topics_repository.get_topic(topic), errors.TopicNotFound())

    rows = await repository.list_articles(sort_by=sort_by, order=order, topic=topic)
    return [schemas.ArticleSummary(**row) for row in rows]


async def require_article(article_id: int) -> dict[str, Any]:
    """
    Return the article row or raise ArticleNotFound.
    """
    if not validation.fits_int4(article_id):
        raise errors.ArticleNotFound()
    return await ensure_exists(repository.get_article(article_id), errors.ArticleNotFound())


async def get_article(article_id: int) -> schemas.ArticleOut:
    row = await require_article(article_id)
    return schemas.ArticleOut(**row)


def parse_vote_update(payload: Any) -> int:
    try:
        update = schemas.VoteUpdate.model_validate(payload)
    except ValidationError as exc:
        raise errors.InvalidVoteDelta() from exc
    if not validation.fits_int4(update.inc_votes):
        raise errors.InvalidVoteDelta()
    return update.inc_votes


async def increment_votes(article_id: int, payload: Any) -> schemas.ArticleOut:
    inc_votes = parse_vote_update(payload)
    await require_article(article_id)

    row = await repository.add_votes(article_id, inc_votes)
    if row is None:
        # Deleted between the existence check and the update.
        raise errors.ArticleNotFound()
    logger.info("votes_changed article_id=%s inc_votes=%s votes=%s", article_id, inc_votes, row["votes"])
    return schemas.ArticleOut(**row)
