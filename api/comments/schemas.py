"""
Comment request/response models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr


class CommentOut(BaseModel):
    comment_id: int
    article_id: int | None = None
    body: str | None = None
    votes: int = 0
    author: str | None = None
    created_at: datetime | None = None


class CommentCreate(BaseModel):
    """
    POST body. The author may be sent as `username` or `author`; any other
    key (including `votes`) is dropped.
    """

    model_config = ConfigDict(extra="ignore")

    author: StrictStr = Field(min_length=1, validation_alias=AliasChoices("username", "author"))
    body: StrictStr = Field(min_length=1)
