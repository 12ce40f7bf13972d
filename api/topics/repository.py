"""
Topic persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_topics() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT slug, description, img_url
        FROM topics
        ORDER BY slug
        """
    )


async def get_topic(slug: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT slug, description, img_url
        FROM topics
        WHERE slug = $1
        """,
        slug,
    )
