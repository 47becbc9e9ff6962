"""
Backup business logic: portable export/import and the clear-all operation.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg
from fastapi import HTTPException
from pydantic import ValidationError

from entries import repository as entries_repository
from entries import service as entries_service
from entries.schemas import EntryPayload

from . import repository
from .schemas import PortableEntry

logger = logging.getLogger(__name__)


def to_portable(row: dict[str, Any]) -> dict[str, Any]:
    entry = entries_service.to_entry_row(row)
    return {
        "title": entry["title"],
        "category": entry["category_name"],
        "date": entry["learning_date"],
        "notes": entry["notes_markdown"],
        "difficulty": entry["difficulty_level"],
        "revision": entry["needs_revision"],
        "tags": entry["tags"],
        "resources": entry["resources"],
    }


def to_payload(item: PortableEntry) -> EntryPayload:
    return EntryPayload(
        title=item.title.strip()[:300] or "Untitled",
        category_name=item.category,
        date=item.date,
        notes=item.notes,
        difficulty=item.difficulty,
        needs_revision=item.revision,
        tags=item.tags,
        resources=item.resources,
    )


def parse_import(raw: list[Any] | dict[str, Any]) -> list[EntryPayload]:
    """
    Validate an import body (a list of portable entries or a single one).

    Null items are skipped; anything else that fails validation rejects the
    whole import with the offending index.
    """
    items = raw if isinstance(raw, list) else [raw]
    payloads: list[EntryPayload] = []
    for index, item in enumerate(items):
        if item is None:
            continue
        try:
            payloads.append(to_payload(PortableEntry.model_validate(item)))
        except ValidationError as exc:
            raise HTTPException(
                status_code=422,
                detail=f"Invalid entry at index {index}: {exc.errors()[0].get('msg', 'invalid value')}",
            ) from exc
    return payloads


async def export_entries(*, user_id: int) -> list[dict[str, Any]]:
    try:
        rows = await entries_repository.list_all_entries(user_id=user_id)
    except asyncpg.PostgresError as exc:
        logger.error("backup_db_error action=export user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to export data.") from exc
    return [to_portable(r) for r in rows]


async def import_entries(raw: list[Any] | dict[str, Any], *, user_id: int) -> dict[str, Any]:
    payloads = parse_import(raw)
    if not payloads:
        return {"success": True, "imported": 0}

    try:
        imported = await repository.import_entries(user_id=user_id, payloads=payloads)
    except asyncpg.PostgresError as exc:
        logger.error("backup_db_error action=import user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to import data.") from exc

    logger.info("backup_import_complete user_id=%s imported=%s", user_id, imported)
    return {"success": True, "imported": imported}


async def clear_all(*, user_id: int) -> dict[str, Any]:
    try:
        removed = await repository.clear_all(user_id=user_id)
    except asyncpg.PostgresError as exc:
        logger.error("backup_db_error action=clear_all user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to clear data.") from exc

    logger.warning(
        "clear_all_complete user_id=%s entries=%s categories=%s tags=%s",
        user_id,
        removed["entries"],
        removed["categories"],
        removed["tags"],
    )
    return {"success": True, "message": "All data cleared"}
