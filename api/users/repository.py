"""
User persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_users() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT username, name, avatar_url
        FROM users
        ORDER BY username
        """
    )


async def get_user(username: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT username, name, avatar_url
        FROM users
        WHERE username = $1
        """,
        username,
    )
