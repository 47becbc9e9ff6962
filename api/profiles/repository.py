"""
Profile persistence (raw SQL).
"""

from __future__ import annotations

from core import db


async def get_profile(*, user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT display_name AS name, bio
        FROM users
        WHERE user_id = $1
        """,
        user_id,
    )


async def update_profile(*, user_id: int, name: str, bio: str) -> bool:
    row = await db.fetch_one(
        """
        UPDATE users
        SET display_name = $2,
            bio = $3,
            updated_at = now()
        WHERE user_id = $1
        RETURNING user_id
        """,
        user_id,
        name,
        bio,
    )
    return row is not None
