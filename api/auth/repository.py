"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db

_USER_COLUMNS = "user_id, email, password_hash, display_name, bio, is_active, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, email: str, password_hash: str, display_name: str = "") -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (email, password_hash, display_name)
        VALUES ($1, $2, $3)
        RETURNING {_USER_COLUMNS}
        """,
        normalize_email(email),
        password_hash,
        (display_name or "").strip(),
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE user_id = $1
        """,
        user_id,
    )
