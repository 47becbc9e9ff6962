"""
Category persistence (raw SQL).
"""

from __future__ import annotations

from core import db


async def list_category_names(*, user_id: int) -> list[str]:
    rows = await db.fetch_all(
        """
        SELECT name
        FROM categories
        WHERE user_id = $1
        ORDER BY name
        """,
        user_id,
    )
    return [str(r["name"]) for r in rows]
