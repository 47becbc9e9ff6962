"""
Entry business logic.

Scope:
- permissive parsing of listing filters and paging
- shaping DB rows into the API entry shape
- mapping database failures to generic HTTP errors
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import asyncpg
from fastapi import HTTPException, status

from . import query, repository
from .schemas import EntryPayload

logger = logging.getLogger(__name__)


def _date_string(value: Any) -> str | None:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return None
    return str(value)[:10]


def to_entry_row(row: dict[str, Any]) -> dict[str, Any]:
    tags = row.get("tags") or []
    return {
        "entry_id": int(row["entry_id"]),
        "title": str(row["title"]),
        "category_name": row.get("category_name") or query.UNCATEGORIZED_LABEL,
        "notes_markdown": str(row.get("notes_markdown") or ""),
        "difficulty_level": int(row.get("difficulty_level") or 1),
        "needs_revision": bool(row.get("needs_revision", False)),
        "learning_date": _date_string(row.get("learning_date")),
        # DISTINCT in SQL already; keep a guard for callers passing raw lists.
        "tags": list(dict.fromkeys(str(t) for t in tags)),
        "resources": [str(url) for url in row.get("resources") or []],
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }


def _db_failure(action: str, exc: Exception, *, user_id: int) -> HTTPException:
    logger.error("entries_db_error action=%s user_id=%s error=%s", action, user_id, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}.",
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found.")


async def query_entries(
    *,
    user_id: int,
    filters: query.EntryFilters,
    page: query.PageRequest,
) -> tuple[list[dict[str, Any]], int]:
    """
    Return (rows, total) for the given filters and page.
    """
    rows, total = await repository.list_entries(user_id=user_id, filters=filters, page=page)
    return [to_entry_row(r) for r in rows], total


async def list_entries(
    *,
    user_id: int,
    search: str | None = None,
    category: str | None = None,
    difficulty: Any = None,
    revision: Any = None,
    page: Any = None,
    limit: Any = None,
) -> dict[str, Any]:
    filters = query.parse_filters(
        search=search,
        category=category,
        difficulty=difficulty,
        revision=revision,
    )
    page_request = query.parse_page(page, limit)

    try:
        rows, total = await query_entries(user_id=user_id, filters=filters, page=page_request)
    except asyncpg.PostgresError as exc:
        raise _db_failure("fetch entries", exc, user_id=user_id) from exc

    return {
        "data": rows,
        "pagination": {
            "total": total,
            "page": page_request.page,
            "limit": page_request.limit,
            "totalPages": query.total_pages(total, page_request.limit),
        },
    }


async def get_entry(entry_id: int, *, user_id: int) -> dict[str, Any]:
    try:
        row = await repository.get_entry(entry_id, user_id=user_id)
    except asyncpg.PostgresError as exc:
        raise _db_failure("fetch entry", exc, user_id=user_id) from exc
    if row is None:
        raise _not_found()
    return to_entry_row(row)


async def create_entry(payload: EntryPayload, *, user_id: int) -> dict[str, Any]:
    try:
        row = await repository.create_entry(user_id=user_id, payload=payload)
    except asyncpg.PostgresError as exc:
        raise _db_failure("save entry", exc, user_id=user_id) from exc

    logger.info("entry_created entry_id=%s user_id=%s", row["entry_id"], user_id)
    return {
        "id": int(row["entry_id"]),
        "timestamp": row["created_at"],
        "success": True,
    }


async def update_entry(entry_id: int, payload: EntryPayload, *, user_id: int) -> dict[str, Any]:
    try:
        row = await repository.update_entry(entry_id, user_id=user_id, payload=payload)
    except asyncpg.PostgresError as exc:
        raise _db_failure("update entry", exc, user_id=user_id) from exc
    if row is None:
        raise _not_found()

    logger.info("entry_updated entry_id=%s user_id=%s", entry_id, user_id)
    return to_entry_row(row)


async def delete_entry(entry_id: int, *, user_id: int) -> dict[str, str]:
    try:
        deleted = await repository.delete_entry(entry_id, user_id=user_id)
    except asyncpg.PostgresError as exc:
        raise _db_failure("delete entry", exc, user_id=user_id) from exc
    if not deleted:
        raise _not_found()

    logger.info("entry_deleted entry_id=%s user_id=%s", entry_id, user_id)
    return {"message": "Deleted"}
