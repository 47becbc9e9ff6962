"""
Profile API endpoints.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import APIRouter, Depends, HTTPException

from auth import dependencies as auth_dependencies

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile")
async def get_profile(
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> schemas.ProfileResponse:
    try:
        row = await repository.get_profile(user_id=user_id)
    except asyncpg.PostgresError as exc:
        logger.error("profile_db_error action=load user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to load profile.") from exc
    if row is None:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return schemas.ProfileResponse(name=str(row["name"] or ""), bio=str(row["bio"] or ""))


@router.put("/profile")
async def update_profile(
    request: schemas.ProfileUpdateRequest,
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    try:
        updated = await repository.update_profile(
            user_id=user_id,
            name=request.name.strip(),
            bio=request.bio.strip(),
        )
    except asyncpg.PostgresError as exc:
        logger.error("profile_db_error action=update user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to update profile.") from exc
    if not updated:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return {"success": True}
