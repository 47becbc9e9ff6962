"""
Stats API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter()


@router.get("/stats")
async def get_stats(
    today: str | None = Query(default=None, max_length=32),
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.get_stats(user_id=user_id, today=service.parse_today(today))
