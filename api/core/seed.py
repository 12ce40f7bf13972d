"""
Schema creation and data seeding.

Seed data uses the fixture shape:
- topics:   {slug, description, img_url}
- users:    {username, name, avatar_url}
- articles: {title, topic, author, body, created_at, votes, article_img_url}
- comments: {article_title, body, votes, author, created_at}

`created_at` is epoch milliseconds in the fixtures. Comments refer to their
article by title; the generated `article_id` is resolved after the articles
are inserted.

Usage:
    python -m core.seed path/to/data.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Sequence

import asyncpg

from . import db
from .log import configure_logging

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).resolve().parent / "schema.sql"

TOPIC_COLUMNS = ("slug", "description", "img_url")
USER_COLUMNS = ("username", "name", "avatar_url")
ARTICLE_COLUMNS = ("title", "topic", "author", "body", "created_at", "votes", "article_img_url")
COMMENT_COLUMNS = ("article_id", "body", "votes", "author", "created_at")


def convert_timestamp_to_date(row: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of `row` with an epoch-millisecond `created_at` turned into
    a naive UTC datetime (the column is TIMESTAMP without time zone).
    """
    converted = dict(row)
    created_at = converted.get("created_at")
    if isinstance(created_at, (int, float)) and not isinstance(created_at, bool):
        converted["created_at"] = datetime.fromtimestamp(created_at / 1000, tz=timezone.utc).replace(tzinfo=None)
    return converted


def create_ref(rows: Iterable[dict[str, Any]], key: str, value: str) -> dict[Any, Any]:
    """
    Build a lookup such as {title: article_id} from inserted rows.
    """
    return {row[key]: row[value] for row in rows}


def _with_defaults(row: dict[str, Any]) -> dict[str, Any]:
    # Explicit NULLs would bypass the column defaults.
    prepared = convert_timestamp_to_date(row)
    if prepared.get("votes") is None:
        prepared["votes"] = 0
    if prepared.get("created_at") is None:
        prepared["created_at"] = datetime.now(timezone.utc).replace(tzinfo=None)
    return prepared


def format_rows(rows: Iterable[dict[str, Any]], columns: Sequence[str]) -> list[tuple[Any, ...]]:
    return [tuple(row.get(column) for column in columns) for row in rows]


def _insert_sql(table: str, columns: Sequence[str], returning: str | None = None) -> str:
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    if returning:
        sql += f" RETURNING {returning}"
    return sql


async def create_schema(conn: asyncpg.Connection) -> None:
    await conn.execute(SCHEMA_FILE.read_text(encoding="utf-8"))


async def seed(
    conn: asyncpg.Connection,
    *,
    topics: list[dict[str, Any]],
    users: list[dict[str, Any]],
    articles: list[dict[str, Any]],
    comments: list[dict[str, Any]],
) -> None:
    async with conn.transaction():
        await create_schema(conn)

        await conn.executemany(_insert_sql("topics", TOPIC_COLUMNS), format_rows(topics, TOPIC_COLUMNS))
        await conn.executemany(_insert_sql("users", USER_COLUMNS), format_rows(users, USER_COLUMNS))

        # Inserted one by one to collect the generated ids.
        article_sql = _insert_sql("articles", ARTICLE_COLUMNS, returning="article_id, title")
        inserted: list[dict[str, Any]] = []
        for values in format_rows((_with_defaults(a) for a in articles), ARTICLE_COLUMNS):
            record = await conn.fetchrow(article_sql, *values)
            inserted.append(dict(record))

        article_ids = create_ref(inserted, "title", "article_id")
        resolved = [
            {**_with_defaults(c), "article_id": article_ids.get(c.get("article_title"))}
            for c in comments
        ]
        await conn.executemany(_insert_sql("comments", COMMENT_COLUMNS), format_rows(resolved, COMMENT_COLUMNS))

    logger.info(
        "seeded topics=%s users=%s articles=%s comments=%s",
        len(topics),
        len(users),
        len(articles),
        len(comments),
    )


async def seed_from_file(path: Path) -> None:
    data = json.loads(path.read_text(encoding="utf-8"))
    conn = await db.connect()
    try:
        await seed(
            conn,
            topics=data.get("topics", []),
            users=data.get("users", []),
            articles=data.get("articles", []),
            comments=data.get("comments", []),
        )
    finally:
        await conn.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Recreate the schema and load seed data.")
    parser.add_argument("data", type=Path, help="JSON file with topics/users/articles/comments arrays")
    args = parser.parse_args(argv)

    configure_logging()
    asyncio.run(seed_from_file(args.data))


if __name__ == "__main__":
    main()
