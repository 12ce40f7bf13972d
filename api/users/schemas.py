from __future__ import annotations

from pydantic import BaseModel


class UserOut(BaseModel):
    username: str
    name: str | None = None
    avatar_url: str | None = None
