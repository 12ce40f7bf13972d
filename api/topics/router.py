"""
Topic API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import repository, schemas

router = APIRouter()


@router.get("/api/topics")
async def get_topics() -> dict:
    rows = await repository.list_topics()
    return {"topics": [schemas.TopicOut(**row) for row in rows]}
