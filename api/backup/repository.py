"""
Backup persistence: bulk import and clear-all, each in one transaction.
"""

from __future__ import annotations

from core import db
from entries import repository as entries_repository
from entries.schemas import EntryPayload


async def import_entries(*, user_id: int, payloads: list[EntryPayload]) -> int:
    async with db.pool().acquire() as conn:
        async with conn.transaction():
            for payload in payloads:
                await entries_repository.insert_entry(conn, user_id=user_id, payload=payload)
    return len(payloads)


async def clear_all(*, user_id: int) -> dict[str, int]:
    """
    Delete every entry and category of a user, then unreferenced tags.
    """
    async with db.pool().acquire() as conn:
        async with conn.transaction():
            # Cascades to resources and entry_tags.
            entries_status = await conn.execute("DELETE FROM entries WHERE user_id = $1", user_id)
            categories_status = await conn.execute("DELETE FROM categories WHERE user_id = $1", user_id)
            tags_removed = await entries_repository.delete_orphan_tags(conn)
    return {
        "entries": entries_repository.affected_rows(entries_status),
        "categories": entries_repository.affected_rows(categories_status),
        "tags": tags_removed,
    }
