"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from core import errors
from core.existence import ensure_exists

from . import repository, schemas

router = APIRouter()


@router.get("/api/users")
async def get_users() -> dict:
    rows = await repository.list_users()
    return {"users": [schemas.UserOut(**row) for row in rows]}


@router.get("/api/users/{username}")
async def get_user_by_username(username: str) -> dict:
    row = await ensure_exists(repository.get_user(username), errors.UserNotFound())
    return {"user": schemas.UserOut(**row)}
