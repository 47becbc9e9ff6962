"""
Backup API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter()


@router.get("/export")
async def export_entries(
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> list[dict]:
    return await service.export_entries(user_id=user_id)


@router.post("/import")
async def import_entries(
    payload: list[Any] | dict[str, Any] = Body(...),
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.import_entries(payload, user_id=user_id)


@router.delete("/danger/clear-all")
async def clear_all(
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.clear_all(user_id=user_id)
