"""
Category API endpoints.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import APIRouter, Depends, HTTPException

from auth import dependencies as auth_dependencies

from . import repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/categories")
async def list_categories(
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> list[str]:
    try:
        return await repository.list_category_names(user_id=user_id)
    except asyncpg.PostgresError as exc:
        logger.error("categories_db_error user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to load categories.") from exc
