from __future__ import annotations

from pydantic import BaseModel


class TopicOut(BaseModel):
    slug: str
    description: str | None = None
    img_url: str | None = None
