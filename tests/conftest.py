from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

# Ensure `api/` is on sys.path for `import core`, `import articles`, ...
API_ROOT = Path(__file__).resolve().parents[1] / "api"
if str(API_ROOT) not in sys.path:
    sys.path.insert(0, str(API_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

BASE_TIME = datetime(2020, 1, 1, 12, 0, 0)


def _topics() -> list[dict[str, Any]]:
    return [
        {"slug": "mitch", "description": "The man, the Mitch, the legend", "img_url": ""},
        {"slug": "cats", "description": "Not dogs", "img_url": ""},
        {"slug": "paper", "description": "what books are made of", "img_url": ""},
    ]


def _users() -> list[dict[str, Any]]:
    return [
        {"username": "butter_bridge", "name": "jonny", "avatar_url": "https://example.com/a.jpg"},
        {"username": "icellusedkars", "name": "sam", "avatar_url": "https://example.com/b.jpg"},
        {"username": "rogersop", "name": "paul", "avatar_url": "https://example.com/c.jpg"},
        {"username": "lurker", "name": "do_nothing", "avatar_url": "https://example.com/d.jpg"},
    ]


def _articles() -> list[dict[str, Any]]:
    def article(article_id: int, title: str, topic: str, author: str, days: int, votes: int = 0) -> dict:
        return {
            "article_id": article_id,
            "title": title,
            "topic": topic,
            "author": author,
            "body": f"body of {title}",
            "created_at": BASE_TIME + timedelta(days=days),
            "votes": votes,
            "article_img_url": f"https://example.com/{article_id}.jpg",
        }

    return [
        article(1, "Living in the shadow of a great man", "mitch", "butter_bridge", 10, votes=100),
        article(2, "Sony Vaio; or, The Laptop", "mitch", "icellusedkars", 3),
        article(3, "Eight pug gifs that remind me of mitch", "mitch", "icellusedkars", 7),
        article(4, "UNCOVERED: catspiracy to bring down democracy", "cats", "rogersop", 5),
        article(5, "A", "mitch", "icellusedkars", 5),
        article(6, "Z", "mitch", "rogersop", 1),
    ]


def _comments() -> list[dict[str, Any]]:
    def comment(comment_id: int, article_id: int, author: str, hours: int, votes: int = 0) -> dict:
        return {
            "comment_id": comment_id,
            "article_id": article_id,
            "body": f"comment {comment_id}",
            "votes": votes,
            "author": author,
            "created_at": BASE_TIME + timedelta(hours=hours),
        }

    return [
        comment(1, 1, "butter_bridge", 1, votes=16),
        comment(2, 1, "icellusedkars", 5),
        comment(3, 1, "rogersop", 3),
        comment(4, 3, "icellusedkars", 2),
        comment(5, 4, "butter_bridge", 4),
    ]


def _sort_value(value: Any) -> tuple[int, Any]:
    # Postgres sorts NULLs last in ascending order.
    return (1, 0) if value is None else (0, value)


class FakeStore:
    """
    In-memory stand-in for the repository layer, seeded with the mitch/cats/paper data.

    Every repository call is appended to `calls` so tests can assert that
    validation failures never reach the store.
    """

    def __init__(self) -> None:
        self.topics = _topics()
        self.users = _users()
        self.articles = _articles()
        self.comments = _comments()
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def _comment_count(self, article_id: int) -> int:
        return sum(1 for c in self.comments if c["article_id"] == article_id)

    def _summary(self, article: dict[str, Any]) -> dict[str, Any]:
        row = {k: v for k, v in article.items() if k != "body"}
        row["comment_count"] = self._comment_count(article["article_id"])
        return row

    async def list_topics(self) -> list[dict[str, Any]]:
        self._record("list_topics")
        return [dict(t) for t in self.topics]

    async def get_topic(self, slug: str) -> dict[str, Any] | None:
        self._record("get_topic", slug)
        return next((dict(t) for t in self.topics if t["slug"] == slug), None)

    async def list_users(self) -> list[dict[str, Any]]:
        self._record("list_users")
        return [dict(u) for u in self.users]

    async def get_user(self, username: str) -> dict[str, Any] | None:
        self._record("get_user", username)
        return next((dict(u) for u in self.users if u["username"] == username), None)

    async def list_articles(self, *, sort_by: str, order: str, topic: str | None = None) -> list[dict[str, Any]]:
        self._record("list_articles", sort_by, order, topic)
        rows = [self._summary(a) for a in self.articles if topic is None or a["topic"] == topic]
        rows.sort(key=lambda r: (_sort_value(r[sort_by]), r["article_id"]), reverse=order == "desc")
        return rows

    async def get_article(self, article_id: int) -> dict[str, Any] | None:
        self._record("get_article", article_id)
        for article in self.articles:
            if article["article_id"] == article_id:
                row = dict(article)
                row["comment_count"] = self._comment_count(article_id)
                return row
        return None

    async def add_votes(self, article_id: int, inc_votes: int) -> dict[str, Any] | None:
        self._record("add_votes", article_id, inc_votes)
        for article in self.articles:
            if article["article_id"] == article_id:
                article["votes"] += inc_votes
                row = dict(article)
                row["comment_count"] = self._comment_count(article_id)
                return row
        return None

    async def list_comments_for_article(self, article_id: int) -> list[dict[str, Any]]:
        self._record("list_comments_for_article", article_id)
        rows = [dict(c) for c in self.comments if c["article_id"] == article_id]
        rows.sort(key=lambda c: (c["created_at"], c["comment_id"]), reverse=True)
        return rows

    async def get_comment(self, comment_id: int) -> dict[str, Any] | None:
        self._record("get_comment", comment_id)
        return next((dict(c) for c in self.comments if c["comment_id"] == comment_id), None)

    async def insert_comment(self, *, article_id: int, author: str, body: str) -> dict[str, Any]:
        self._record("insert_comment", article_id, author, body)
        row = {
            "comment_id": max((c["comment_id"] for c in self.comments), default=0) + 1,
            "article_id": article_id,
            "body": body,
            "votes": 0,
            "author": author,
            "created_at": datetime.now(),
        }
        self.comments.append(row)
        return dict(row)

    async def delete_comment(self, comment_id: int) -> bool:
        self._record("delete_comment", comment_id)
        before = len(self.comments)
        self.comments = [c for c in self.comments if c["comment_id"] != comment_id]
        return len(self.comments) < before


class RecordingDB:
    """
    Replacement for `core.db` query helpers that records SQL and returns canned rows.
    """

    def __init__(self) -> None:
        self.queries: list[tuple[str, tuple[Any, ...]]] = []
        self.one_result: dict[str, Any] | None = None
        self.all_result: list[dict[str, Any]] = []

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.queries.append((sql, args))
        return self.one_result

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.queries.append((sql, args))
        return list(self.all_result)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def recording_db(monkeypatch) -> RecordingDB:
    from core import db

    fake = RecordingDB()
    monkeypatch.setattr(db, "fetch_one", fake.fetch_one)
    monkeypatch.setattr(db, "fetch_all", fake.fetch_all)
    return fake


@pytest.fixture()
def store(monkeypatch) -> FakeStore:
    from articles import repository as articles_repository
    from comments import repository as comments_repository
    from topics import repository as topics_repository
    from users import repository as users_repository

    fake = FakeStore()
    for name in ("list_topics", "get_topic"):
        monkeypatch.setattr(topics_repository, name, getattr(fake, name))
    for name in ("list_users", "get_user"):
        monkeypatch.setattr(users_repository, name, getattr(fake, name))
    for name in ("list_articles", "get_article", "add_votes"):
        monkeypatch.setattr(articles_repository, name, getattr(fake, name))
    for name in ("list_comments_for_article", "get_comment", "insert_comment", "delete_comment"):
        monkeypatch.setattr(comments_repository, name, getattr(fake, name))
    return fake


@pytest.fixture()
def client(monkeypatch, store):
    # Patch DB init/close in lifespan to no-op
    from core import db

    async def _noop(*args, **kwargs):
        return None

    monkeypatch.setattr(db, "init_pool", _noop)
    monkeypatch.setattr(db, "close_pool", _noop)

    from main import app

    with TestClient(app) as test_client:
        yield test_client
