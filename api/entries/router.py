"""
Entry API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from auth import dependencies as auth_dependencies

from . import maintenance, service
from .schemas import EntryPayload

router = APIRouter()


@router.get("/entries")
async def list_entries(
    # Kept as raw strings: bad numeric values are ignored, not rejected.
    search: str | None = Query(default=None, max_length=500),
    category: str | None = Query(default=None, max_length=120),
    difficulty: str | None = Query(default=None),
    revision: str | None = Query(default=None),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.list_entries(
        user_id=user_id,
        search=search,
        category=category,
        difficulty=difficulty,
        revision=revision,
        page=page,
        limit=limit,
    )


@router.get("/entries/{entry_id}")
async def get_entry(
    entry_id: int,
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.get_entry(entry_id, user_id=user_id)


@router.post("/entries")
async def create_entry(
    request: EntryPayload,
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.create_entry(request, user_id=user_id)


@router.put("/entries/{entry_id}")
async def update_entry(
    entry_id: int,
    request: EntryPayload,
    background_tasks: BackgroundTasks,
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    result = await service.update_entry(entry_id, request, user_id=user_id)
    background_tasks.add_task(maintenance.prune_orphans_background, user_id=user_id)
    return result


@router.delete("/entries/{entry_id}")
async def delete_entry(
    entry_id: int,
    background_tasks: BackgroundTasks,
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    result = await service.delete_entry(entry_id, user_id=user_id)
    background_tasks.add_task(maintenance.prune_orphans_background, user_id=user_id)
    return result
