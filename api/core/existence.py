"""
Existence-check gate: look up a referenced row before doing dependent work.

The lookup and the dependent statement are two separate statements, not a
transaction. A concurrent delete in between is possible; callers that write
check the RETURNING row of their own statement as well.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

from .errors import NotFoundError

T = TypeVar("T")

Row = dict[str, Any]


async def ensure_exists(lookup: Awaitable[Row | None], error: NotFoundError) -> Row:
    row = await lookup
    if row is None:
        raise error
    return row


async def with_existence_check(
    lookup: Awaitable[Row | None],
    on_found: Callable[[Row], Awaitable[T]],
    error: NotFoundError,
) -> T:
    """
    Await `lookup`; raise `error` if it produced no row, else return `on_found(row)`.
    """
    row = await ensure_exists(lookup, error)
    return await on_found(row)
