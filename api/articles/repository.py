"""
Article persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

# Allow-listed sort keys -> SQL expression. Keys must match
# `core.validation.SORTABLE_COLUMNS`.
SORT_EXPRESSIONS: dict[str, str] = {
    "article_id": "articles.article_id",
    "title": "articles.title",
    "topic": "articles.topic",
    "author": "articles.author",
    "created_at": "articles.created_at",
    "votes": "articles.votes",
    "comment_count": "comment_count",
}

_SUMMARY_COLUMNS = """
          articles.article_id,
          articles.title,
          articles.topic,
          articles.author,
          articles.created_at,
          articles.votes,
          articles.article_img_url,
          COUNT(comments.comment_id)::INT AS comment_count"""


def build_list_articles_sql(sort_by: str, order: str, *, with_topic: bool) -> str:
    """
    Build the article listing query.

    `sort_by` and `order` are interpolated and must already be validated;
    the topic value is always bound as $1.
    """
    direction = order.upper()
    if direction not in ("ASC", "DESC"):
        raise ValueError(f"unvalidated sort order: {order!r}")
    sort_expr = SORT_EXPRESSIONS[sort_by]
    where_sql = "WHERE articles.topic = $1" if with_topic else ""
    return f"""
        SELECT{_SUMMARY_COLUMNS}
        FROM articles
        LEFT JOIN comments ON comments.article_id = articles.article_id
        {where_sql}
        GROUP BY articles.article_id
        ORDER BY {sort_expr} {direction}, articles.article_id {direction}
        """


async def list_articles(*, sort_by: str, order: str, topic: str | None = None) -> list[dict[str, Any]]:
    sql = build_list_articles_sql(sort_by, order, with_topic=topic is not None)
    if topic is None:
        return await db.fetch_all(sql)
    return await db.fetch_all(sql, topic)


async def get_article(article_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT{_SUMMARY_COLUMNS},
          articles.body
        FROM articles
        LEFT JOIN comments ON comments.article_id = articles.article_id
        WHERE articles.article_id = $1
        GROUP BY articles.article_id
        """,
        article_id,
    )


async def add_votes(article_id: int, inc_votes: int) -> dict[str, Any] | None:
    """
    Apply `votes = votes + inc_votes`. Returns the updated row, or None if
    the article no longer exists.
    """
    return await db.fetch_one(
        """
        WITH updated AS (
            UPDATE articles
            SET votes = votes + $1
            WHERE article_id = $2
            RETURNING *
        )
        SELECT
          updated.article_id,
          updated.title,
          updated.topic,
          updated.author,
          updated.body,
          updated.created_at,
          updated.votes,
          updated.article_img_url,
          (SELECT COUNT(*)::INT FROM comments WHERE comments.article_id = updated.article_id) AS comment_count
        FROM updated
        """,
        inc_votes,
        article_id,
    )
