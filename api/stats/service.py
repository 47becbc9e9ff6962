"""
Dashboard stats.

`today` comes from the client (its local calendar date) so streaks and
activity windows follow the user's timezone rather than the server's.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

import asyncpg
from fastapi import HTTPException

from entries.query import UNCATEGORIZED_LABEL

from . import repository
from .streak import compute_streak

logger = logging.getLogger(__name__)

ACTIVITY_DAYS = 7
HEATMAP_DAYS = 365


def parse_today(raw: str | None, *, fallback: date | None = None) -> date:
    """
    Parse a YYYY-MM-DD client date; fall back to the server date when absent
    or malformed.
    """
    text = (raw or "").strip()
    if text:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            logger.debug("stats_bad_today value=%r", text)
    return fallback or date.today()


def _daily_counts(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {"learning_date": r["learning_date"].isoformat(), "count": int(r["count"])}
        for r in rows
    ]


def _category_counts(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    merged: dict[str, int] = {}
    for r in rows:
        name = r.get("name") or UNCATEGORIZED_LABEL
        merged[name] = merged.get(name, 0) + int(r["count"])
    # Merging the NULL group can change the SQL ordering.
    ordered = sorted(merged.items(), key=lambda item: (-item[1], item[0]))
    return [{"name": name, "count": count} for name, count in ordered]


async def get_stats(*, user_id: int, today: date) -> dict[str, Any]:
    activity_start = today - timedelta(days=ACTIVITY_DAYS - 1)
    heatmap_start = today - timedelta(days=HEATMAP_DAYS - 1)

    try:
        snapshot = await repository.fetch_stats_snapshot(
            user_id=user_id,
            today=today,
            activity_start=activity_start,
            heatmap_start=heatmap_start,
        )
    except asyncpg.PostgresError as exc:
        logger.error("stats_db_error user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to fetch stats.") from exc

    return {
        "total": snapshot["total"],
        "revision": snapshot["revision"],
        "streak": compute_streak(snapshot["learning_dates"], today),
        "categories": _category_counts(snapshot["categories"]),
        "activity": _daily_counts(snapshot["activity"]),
        "heatmap": _daily_counts(snapshot["heatmap"]),
    }
