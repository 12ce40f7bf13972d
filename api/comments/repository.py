"""
Comment persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

_COMMENT_COLUMNS = "comment_id, article_id, body, votes, author, created_at"


async def list_comments_for_article(article_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COMMENT_COLUMNS}
        FROM comments
        WHERE article_id = $1
        ORDER BY created_at DESC, comment_id DESC
        """,
        article_id,
    )


async def get_comment(comment_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_COMMENT_COLUMNS}
        FROM comments
        WHERE comment_id = $1
        """,
        comment_id,
    )


async def insert_comment(*, article_id: int, author: str, body: str) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO comments (article_id, author, body)
        VALUES ($1, $2, $3)
        RETURNING {_COMMENT_COLUMNS}
        """,
        article_id,
        author,
        body,
    )
    if row is None:
        raise RuntimeError("Failed to insert comment.")
    return row


async def delete_comment(comment_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM comments
        WHERE comment_id = $1
        RETURNING comment_id
        """,
        comment_id,
    )
    return row is not None
