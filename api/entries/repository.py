"""
Entry persistence (raw SQL).

Reads go through the shared filter builder in `query.py`. Writes take one
connection and run in a single transaction so an entry is never visible
without its tag links and resources.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

from . import query
from .schemas import EntryPayload

ENTRY_COLUMNS = """
    e.entry_id,
    e.title,
    c.name AS category_name,
    e.learning_date,
    e.notes_markdown,
    e.difficulty_level,
    e.needs_revision,
    e.created_at,
    e.updated_at,
    COALESCE(
      (SELECT array_agg(DISTINCT t.name)
       FROM entry_tags et
       JOIN tags t ON t.tag_id = et.tag_id
       WHERE et.entry_id = e.entry_id),
      '{}'::text[]
    ) AS tags,
    COALESCE(
      (SELECT array_agg(r.url ORDER BY r.resource_id)
       FROM resources r
       WHERE r.entry_id = e.entry_id),
      '{}'::text[]
    ) AS resources
"""

ENTRY_FROM = """
    FROM entries e
    LEFT JOIN categories c ON c.category_id = e.category_id
"""


def affected_rows(status: str) -> int:
    """
    Parse asyncpg's command status ("DELETE 3") into a row count.
    """
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0


async def list_entries(
    *,
    user_id: int,
    filters: query.EntryFilters,
    page: query.PageRequest,
) -> tuple[list[dict[str, Any]], int]:
    """
    Return one page of matching entries plus the total match count.

    Both statements share a snapshot so `total` agrees with the page.
    """
    where, args = query.build_where(user_id, filters)
    n = len(args)
    count_sql = f"SELECT count(*)::int AS total {ENTRY_FROM} WHERE {where}"
    rows_sql = f"""
        SELECT {ENTRY_COLUMNS}
        {ENTRY_FROM}
        WHERE {where}
        ORDER BY e.updated_at DESC, e.entry_id DESC
        LIMIT ${n + 1}
        OFFSET ${n + 2}
    """

    async with db.pool().acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction(isolation="repeatable_read", readonly=True):
            total = int(await conn.fetchval(count_sql, *args) or 0)
            if page.offset >= total:
                return [], total
            rows = await conn.fetch(rows_sql, *args, page.limit, page.offset)
    return db.rows_to_dicts(rows), total


async def _fetch_entry(conn: asyncpg.Connection, entry_id: int, user_id: int) -> dict[str, Any] | None:
    row = await conn.fetchrow(
        f"""
        SELECT {ENTRY_COLUMNS}
        {ENTRY_FROM}
        WHERE e.entry_id = $1
          AND e.user_id = $2
        """,
        entry_id,
        user_id,
    )
    return dict(row) if row is not None else None


async def get_entry(entry_id: int, *, user_id: int) -> dict[str, Any] | None:
    async with db.pool().acquire() as conn:  # type: asyncpg.Connection
        return await _fetch_entry(conn, entry_id, user_id)


async def list_all_entries(*, user_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {ENTRY_COLUMNS}
        {ENTRY_FROM}
        WHERE e.user_id = $1
        ORDER BY e.learning_date ASC, e.entry_id ASC
        """,
        user_id,
    )


async def list_recent_entries(*, user_id: int, limit: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {ENTRY_COLUMNS}
        {ENTRY_FROM}
        WHERE e.user_id = $1
        ORDER BY e.updated_at DESC, e.entry_id DESC
        LIMIT $2
        """,
        user_id,
        limit,
    )


async def upsert_category(conn: asyncpg.Connection, *, user_id: int, name: str) -> int:
    """
    Find-or-create a category by (owner, name).

    The no-op DO UPDATE returns the existing id and row-locks it, so a
    concurrent orphan sweep skips it until this transaction ends.
    """
    category_id = await conn.fetchval(
        """
        INSERT INTO categories (user_id, name)
        VALUES ($1, $2)
        ON CONFLICT (user_id, name) DO UPDATE
        SET name = EXCLUDED.name
        RETURNING category_id
        """,
        user_id,
        name,
    )
    if category_id is None:
        raise RuntimeError("Failed to upsert category.")
    return int(category_id)


async def upsert_tags(conn: asyncpg.Connection, names: list[str]) -> list[int]:
    """
    Find-or-create tags by name and return their ids.

    Names are sorted so concurrent writers lock rows in the same order.
    """
    unique_names = sorted(set(names))
    if not unique_names:
        return []
    rows = await conn.fetch(
        """
        INSERT INTO tags (name)
        SELECT unnest($1::text[])
        ON CONFLICT (name) DO UPDATE
        SET name = EXCLUDED.name
        RETURNING tag_id
        """,
        unique_names,
    )
    return [int(r["tag_id"]) for r in rows]


async def _replace_links(
    conn: asyncpg.Connection,
    entry_id: int,
    *,
    tags: list[str],
    resources: list[str],
) -> None:
    # The payload is the source of truth: drop existing links, then re-insert.
    await conn.execute("DELETE FROM resources WHERE entry_id = $1", entry_id)
    await conn.execute("DELETE FROM entry_tags WHERE entry_id = $1", entry_id)

    if resources:
        await conn.executemany(
            "INSERT INTO resources (entry_id, url) VALUES ($1, $2)",
            [(entry_id, url) for url in resources],
        )

    tag_ids = await upsert_tags(conn, tags)
    if tag_ids:
        await conn.execute(
            """
            INSERT INTO entry_tags (entry_id, tag_id)
            SELECT $1, unnest($2::bigint[])
            ON CONFLICT DO NOTHING
            """,
            entry_id,
            tag_ids,
        )


async def insert_entry(conn: asyncpg.Connection, *, user_id: int, payload: EntryPayload) -> dict[str, Any]:
    """
    Insert one entry with its category, tags and resources on `conn`.

    The caller owns the transaction.
    """
    category_id = None
    if payload.category_name:
        category_id = await upsert_category(conn, user_id=user_id, name=payload.category_name)

    row = await conn.fetchrow(
        """
        INSERT INTO entries (
          user_id, category_id, title, learning_date,
          notes_markdown, difficulty_level, needs_revision
        )
        VALUES ($1, $2, $3, COALESCE($4::date, current_date), $5, $6, $7)
        RETURNING entry_id, created_at
        """,
        user_id,
        category_id,
        payload.title,
        payload.date,
        payload.notes,
        payload.difficulty,
        payload.needs_revision,
    )
    if row is None:
        raise RuntimeError("Failed to insert entry.")

    entry_id = int(row["entry_id"])
    await _replace_links(conn, entry_id, tags=payload.tags, resources=payload.resources)
    return dict(row)


async def create_entry(*, user_id: int, payload: EntryPayload) -> dict[str, Any]:
    async with db.pool().acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            return await insert_entry(conn, user_id=user_id, payload=payload)


async def update_entry(entry_id: int, *, user_id: int, payload: EntryPayload) -> dict[str, Any] | None:
    """
    Replace an entry's fields, tags and resources.

    Returns the updated row, or None when the entry does not exist for this
    owner (nothing is written in that case).
    """
    async with db.pool().acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            exists = await conn.fetchval(
                """
                SELECT 1
                FROM entries
                WHERE entry_id = $1
                  AND user_id = $2
                FOR UPDATE
                """,
                entry_id,
                user_id,
            )
            if exists is None:
                return None

            category_id = None
            if payload.category_name:
                category_id = await upsert_category(conn, user_id=user_id, name=payload.category_name)

            await conn.execute(
                """
                UPDATE entries
                SET title = $3,
                    category_id = $4,
                    learning_date = COALESCE($5::date, learning_date),
                    notes_markdown = $6,
                    difficulty_level = $7,
                    needs_revision = $8,
                    updated_at = now()
                WHERE entry_id = $1
                  AND user_id = $2
                """,
                entry_id,
                user_id,
                payload.title,
                category_id,
                payload.date,
                payload.notes,
                payload.difficulty,
                payload.needs_revision,
            )
            await _replace_links(conn, entry_id, tags=payload.tags, resources=payload.resources)
            return await _fetch_entry(conn, entry_id, user_id)


async def delete_entry(entry_id: int, *, user_id: int) -> bool:
    """
    Delete an entry; tag links and resources cascade.
    """
    row = await db.fetch_one(
        """
        DELETE FROM entries
        WHERE entry_id = $1
          AND user_id = $2
        RETURNING entry_id
        """,
        entry_id,
        user_id,
    )
    return row is not None


async def delete_orphan_tags(conn: asyncpg.Connection) -> int:
    status = await conn.execute(
        """
        DELETE FROM tags
        WHERE tag_id IN (
          SELECT t.tag_id
          FROM tags t
          WHERE NOT EXISTS (SELECT 1 FROM entry_tags et WHERE et.tag_id = t.tag_id)
          FOR UPDATE SKIP LOCKED
        )
        """
    )
    return affected_rows(status)


async def delete_orphan_categories(conn: asyncpg.Connection, *, user_id: int) -> int:
    status = await conn.execute(
        """
        DELETE FROM categories
        WHERE category_id IN (
          SELECT c.category_id
          FROM categories c
          WHERE c.user_id = $1
            AND NOT EXISTS (SELECT 1 FROM entries e WHERE e.category_id = c.category_id)
          FOR UPDATE SKIP LOCKED
        )
        """,
        user_id,
    )
    return affected_rows(status)


async def prune_orphans(*, user_id: int) -> tuple[int, int]:
    """
    Remove unreferenced tags (global) and the owner's unreferenced categories.

    Returns (tags_removed, categories_removed).
    """
    async with db.pool().acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            tags_removed = await delete_orphan_tags(conn)
            categories_removed = await delete_orphan_categories(conn, user_id=user_id)
    return tags_removed, categories_removed
