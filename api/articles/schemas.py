"""
Article request/response models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ArticleSummary(BaseModel):
    article_id: int
    title: str | None = None
    topic: str | None = None
    author: str | None = None
    created_at: datetime | None = None
    votes: int = 0
    article_img_url: str | None = None
    comment_count: int = 0


class ArticleOut(ArticleSummary):
    body: str | None = None


class VoteUpdate(BaseModel):
    """
    PATCH body. `inc_votes` must be a whole number; bools and numeric strings
    are rejected rather than coerced.
    """

    model_config = ConfigDict(extra="ignore")

    inc_votes: int

    @field_validator("inc_votes", mode="before")
    @classmethod
    def _whole_number(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("inc_votes must be a number")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError("inc_votes must be a whole number")
        return int(value)
