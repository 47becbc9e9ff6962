"""
Integration fixtures: a real PostgreSQL schema per test.

Set TEST_DATABASE_URL to a disposable database; every test drops and
recreates the tables from the migration's `migrate:up` section.
"""

import os
from pathlib import Path

import asyncpg
import pytest
import pytest_asyncio

from core import db

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "db" / "migrations"


def _split_migration(text: str) -> tuple[str, str]:
    up, _, down = text.partition("-- migrate:down")
    return up.replace("-- migrate:up", "", 1), down


@pytest.fixture(scope="session")
def database_url() -> str:
    url = os.environ.get("TEST_DATABASE_URL", "").strip()
    if not url:
        pytest.skip("TEST_DATABASE_URL is not set")
    return url


@pytest_asyncio.fixture
async def pg_pool(database_url: str):
    conn = await asyncpg.connect(database_url)
    try:
        for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
            up, down = _split_migration(path.read_text())
            await conn.execute(down)
            await conn.execute(up)
    finally:
        await conn.close()

    await db.init_pool(database_url)
    try:
        yield db.pool()
    finally:
        await db.close_pool()


@pytest_asyncio.fixture
async def user_id(pg_pool) -> int:
    row = await db.fetch_one(
        "INSERT INTO users (email, password_hash) VALUES ($1, $2) RETURNING user_id",
        "learner@example.com",
        "x",
    )
    return int(row["user_id"])
