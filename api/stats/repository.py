"""
Stats queries (raw SQL).
"""

from __future__ import annotations

from datetime import date
from typing import Any

from core import db


async def fetch_stats_snapshot(
    *,
    user_id: int,
    today: date,
    activity_start: date,
    heatmap_start: date,
) -> dict[str, Any]:
    """
    Run every dashboard aggregate in one read-only snapshot.
    """
    async with db.pool().acquire() as conn:
        async with conn.transaction(isolation="repeatable_read", readonly=True):
            totals = await conn.fetchrow(
                """
                SELECT
                  count(*)::int AS total,
                  count(*) FILTER (WHERE needs_revision)::int AS revision
                FROM entries
                WHERE user_id = $1
                """,
                user_id,
            )
            learning_dates = await conn.fetch(
                """
                SELECT DISTINCT learning_date
                FROM entries
                WHERE user_id = $1
                  AND learning_date <= $2
                ORDER BY learning_date DESC
                """,
                user_id,
                today,
            )
            categories = await conn.fetch(
                """
                SELECT c.name AS name, count(*)::int AS count
                FROM entries e
                LEFT JOIN categories c ON c.category_id = e.category_id
                WHERE e.user_id = $1
                GROUP BY c.name
                ORDER BY count(*) DESC, c.name ASC NULLS LAST
                """,
                user_id,
            )
            daily = await conn.fetch(
                """
                SELECT learning_date, count(*)::int AS count
                FROM entries
                WHERE user_id = $1
                  AND learning_date >= $2
                  AND learning_date <= $3
                GROUP BY learning_date
                ORDER BY learning_date ASC
                """,
                user_id,
                heatmap_start,
                today,
            )

    daily_rows = db.rows_to_dicts(daily)
    return {
        "total": int(totals["total"]) if totals is not None else 0,
        "revision": int(totals["revision"]) if totals is not None else 0,
        "learning_dates": [r["learning_date"] for r in learning_dates],
        "categories": db.rows_to_dicts(categories),
        "activity": [r for r in daily_rows if r["learning_date"] >= activity_start],
        "heatmap": daily_rows,
    }
