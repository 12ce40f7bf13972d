"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI opens it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
- identifiers (ORDER BY columns, directions) cannot be bound; callers must
  run them through `core.validation` before interpolating.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


@dataclass(frozen=True)
class PoolSettings:
    min_size: int
    max_size: int
    command_timeout: int


def pool_settings() -> PoolSettings:
    min_size = max(_env_int("DB_POOL_MIN_SIZE", 1), 1)
    return PoolSettings(
        min_size=min_size,
        max_size=max(_env_int("DB_POOL_MAX_SIZE", 5), min_size),
        command_timeout=_env_int("DB_COMMAND_TIMEOUT", 30),
    )


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    settings = pool_settings()
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.min_size,
        max_size=settings.max_size,
        command_timeout=settings.command_timeout,
    )
    logger.info("pool_ready min_size=%s max_size=%s", settings.min_size, settings.max_size)


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("pool_closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def connect() -> asyncpg.Connection:
    """
    Open a standalone connection outside the pool (seeding, scripts).
    """
    return await asyncpg.connect(dsn=database_url(), command_timeout=pool_settings().command_timeout)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return its first row as a dict, or None when nothing matched.

    Used for lookups and for INSERT/UPDATE/DELETE ... RETURNING statements,
    where a missing row means the target did not exist.
    """
    row = await pool().fetchrow(sql, *args)
    return dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    rows = await pool().fetch(sql, *args)
    logger.debug("fetch_all rows=%s params=%s", len(rows), len(args))
    return [dict(r) for r in rows]
