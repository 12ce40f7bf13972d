"""
Validation for untrusted query/path parameters.

Sort column and direction end up interpolated into SQL text (identifiers and
keywords cannot be bound as $n parameters), so the exact-membership
allow-lists below are the only thing standing between a query string and the
ORDER BY clause. Keep them as set lookups.
"""

from __future__ import annotations

import re

from . import errors

SORTABLE_COLUMNS = frozenset(
    {
        "article_id",
        "title",
        "topic",
        "author",
        "created_at",
        "votes",
        "comment_count",
    }
)
SORT_ORDERS = frozenset({"asc", "desc"})

DEFAULT_SORT = "created_at"
DEFAULT_ORDER = "desc"

TOPIC_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]+$")
RESOURCE_ID_RE = re.compile(r"^[+-]?[0-9]+$")

# Postgres SERIAL / INT columns.
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1
MAX_INT4_DIGITS = len(str(INT4_MAX))


def _is_absent(value: str | None) -> bool:
    return value is None or value == ""


def validate_sort(column: str | None) -> str:
    if _is_absent(column):
        return DEFAULT_SORT
    if column not in SORTABLE_COLUMNS:
        raise errors.InvalidSortColumn()
    return column


def validate_order(direction: str | None) -> str:
    if _is_absent(direction):
        return DEFAULT_ORDER
    normalized = direction.lower()
    if normalized not in SORT_ORDERS:
        raise errors.InvalidOrder()
    return normalized


def validate_topic_token(token: str | None) -> str | None:
    """
    Return the topic slug to filter by, or None when no filter was given.
    """
    if _is_absent(token):
        return None
    if not TOPIC_TOKEN_RE.fullmatch(token):
        raise errors.InvalidTopicToken()
    return token


def parse_resource_id(raw: str | int, name: str) -> int:
    """
    Parse a numeric path segment.

    Only integer literals are accepted; "abc" or "1.5" are format errors.
    Range is not checked here: out-of-range ids are well-formed and simply
    never match a row (see `fits_int4`).
    """
    if isinstance(raw, bool):
        raise errors.InvalidResourceId(name)
    if isinstance(raw, int):
        return raw
    text = (raw or "").strip()
    if not RESOURCE_ID_RE.fullmatch(text):
        raise errors.InvalidResourceId(name)
    # Long digit strings cannot be int4 and may exceed int()'s digit limit.
    negative = text.startswith("-")
    digits = text.lstrip("+-").lstrip("0") or "0"
    if len(digits) > MAX_INT4_DIGITS:
        return INT4_MIN - 1 if negative else INT4_MAX + 1
    return -int(digits) if negative else int(digits)


def fits_int4(value: int) -> bool:
    return INT4_MIN <= value <= INT4_MAX
