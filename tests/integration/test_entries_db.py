"""
Entry repository tests against PostgreSQL.
"""

from datetime import date, timedelta

import pytest

from backup import repository as backup_repository
from core import db
from entries import repository
from entries.query import EntryFilters, PageRequest
from entries.schemas import EntryPayload
from stats import repository as stats_repository

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def create(user_id: int, **fields) -> int:
    fields.setdefault("title", "Entry")
    row = await repository.create_entry(user_id=user_id, payload=EntryPayload(**fields))
    return int(row["entry_id"])


# =============================================================================
# Writes
# =============================================================================


async def test_create_round_trips_links(user_id: int) -> None:
    entry_id = await create(
        user_id,
        title="Limits",
        category_name="Math",
        date="2024-05-01",
        tags=["calc", "limits"],
        resources=["http://b", "http://a"],
    )

    row = await repository.get_entry(entry_id, user_id=user_id)
    assert row["category_name"] == "Math"
    assert row["learning_date"] == date(2024, 5, 1)
    assert sorted(row["tags"]) == ["calc", "limits"]
    assert row["resources"] == ["http://b", "http://a"]


async def test_missing_date_defaults_to_today(user_id: int) -> None:
    entry_id = await create(user_id)
    row = await repository.get_entry(entry_id, user_id=user_id)
    today = await db.pool().fetchval("SELECT current_date")
    assert row["learning_date"] == today


async def test_update_replaces_links_and_keeps_date(user_id: int) -> None:
    entry_id = await create(user_id, category_name="Math", date="2024-05-01", tags=["a", "b"], resources=["u1"])

    updated = await repository.update_entry(
        entry_id,
        user_id=user_id,
        payload=EntryPayload(title="Renamed", category_name="Physics", tags=["b", "c"], resources=[]),
    )

    assert updated["title"] == "Renamed"
    assert updated["category_name"] == "Physics"
    assert updated["learning_date"] == date(2024, 5, 1)
    assert sorted(updated["tags"]) == ["b", "c"]
    assert updated["resources"] == []


async def test_update_other_users_entry_is_none(user_id: int) -> None:
    entry_id = await create(user_id)
    assert await repository.update_entry(entry_id, user_id=user_id + 1, payload=EntryPayload(title="x")) is None
    assert await repository.delete_entry(entry_id, user_id=user_id + 1) is False


async def test_prune_orphans_after_update(user_id: int) -> None:
    entry_id = await create(user_id, category_name="Math", tags=["old"])
    await create(user_id, category_name="Physics", tags=["kept"])
    await repository.update_entry(
        entry_id,
        user_id=user_id,
        payload=EntryPayload(title="t", category_name="Physics", tags=["kept"]),
    )

    tags_removed, categories_removed = await repository.prune_orphans(user_id=user_id)

    assert (tags_removed, categories_removed) == (1, 1)
    names = await db.fetch_all("SELECT name FROM tags ORDER BY name")
    assert [r["name"] for r in names] == ["kept"]


# =============================================================================
# Listing
# =============================================================================


async def test_pagination_23_entries(user_id: int) -> None:
    for i in range(23):
        await create(user_id, title=f"Entry {i:02d}", date=(date(2024, 1, 1) + timedelta(days=i)).isoformat())

    first, total = await repository.list_entries(user_id=user_id, filters=EntryFilters(), page=PageRequest(1, 15))
    second, _ = await repository.list_entries(user_id=user_id, filters=EntryFilters(), page=PageRequest(2, 15))
    third, total_after = await repository.list_entries(
        user_id=user_id, filters=EntryFilters(), page=PageRequest(3, 15)
    )

    assert total == 23
    assert len(first) == 15
    assert len(second) == 8
    assert third == []
    assert total_after == 23
    ids = [r["entry_id"] for r in first + second]
    assert len(set(ids)) == 23
    # Most recently updated first.
    assert first[0]["title"] == "Entry 22"


async def test_filters_are_conjunctive(user_id: int) -> None:
    await create(user_id, title="Algebra basics", category_name="Math", difficulty=3)
    await create(user_id, title="Algebra in physics", category_name="Physics", difficulty=3)
    await create(user_id, title="Geometry", category_name="Math", difficulty=3)
    await create(user_id, title="Hard algebra", category_name="Math", difficulty=5, needs_revision=True)

    async def ids(filters: EntryFilters) -> set[int]:
        rows, _ = await repository.list_entries(user_id=user_id, filters=filters, page=PageRequest(1, 20))
        return {r["entry_id"] for r in rows}

    rows, total = await repository.list_entries(
        user_id=user_id,
        filters=EntryFilters(search="algebra", category="Math"),
        page=PageRequest(1, 20),
    )
    assert total == 2
    assert {r["title"] for r in rows} == {"Algebra basics", "Hard algebra"}

    both = {r["entry_id"] for r in rows}
    category_only = await ids(EntryFilters(category="Math"))
    search_only = await ids(EntryFilters(search="algebra"))
    assert both < category_only
    assert both < search_only
    assert (len(category_only), len(search_only)) == (3, 3)

    rows, total = await repository.list_entries(
        user_id=user_id,
        filters=EntryFilters(search="algebra", category="Math", difficulty=5, revision_only=True),
        page=PageRequest(1, 20),
    )
    assert total == 1
    assert rows[0]["title"] == "Hard algebra"


async def test_general_category_matches_uncategorized(user_id: int) -> None:
    await create(user_id, title="No category")
    await create(user_id, title="Explicit", category_name="General")
    await create(user_id, title="Other", category_name="Math")

    rows, total = await repository.list_entries(
        user_id=user_id,
        filters=EntryFilters(category="General"),
        page=PageRequest(1, 20),
    )
    assert total == 2
    assert {r["title"] for r in rows} == {"No category", "Explicit"}


async def test_search_treats_wildcards_literally(user_id: int) -> None:
    await create(user_id, title="100% done")
    await create(user_id, title="1000 done")

    rows, total = await repository.list_entries(
        user_id=user_id,
        filters=EntryFilters(search="100%"),
        page=PageRequest(1, 20),
    )
    assert total == 1
    assert rows[0]["title"] == "100% done"


async def test_other_users_entries_are_invisible(user_id: int) -> None:
    other = await db.fetch_one(
        "INSERT INTO users (email, password_hash) VALUES ('other@example.com', 'x') RETURNING user_id"
    )
    await create(int(other["user_id"]), title="Not mine")

    rows, total = await repository.list_entries(user_id=user_id, filters=EntryFilters(), page=PageRequest())
    assert (rows, total) == ([], 0)


# =============================================================================
# Stats And Backup
# =============================================================================


async def test_stats_snapshot(user_id: int) -> None:
    today = date(2024, 5, 15)
    await create(user_id, date="2024-05-15", category_name="Math", needs_revision=True)
    await create(user_id, date="2024-05-14")
    await create(user_id, date="2024-05-20")

    snap = await stats_repository.fetch_stats_snapshot(
        user_id=user_id,
        today=today,
        activity_start=today - timedelta(days=6),
        heatmap_start=today - timedelta(days=364),
    )

    assert snap["total"] == 3
    assert snap["revision"] == 1
    assert date(2024, 5, 20) not in snap["learning_dates"]
    assert {r["learning_date"] for r in snap["activity"]} == {date(2024, 5, 14), date(2024, 5, 15)}


async def test_import_then_clear_all(user_id: int) -> None:
    imported = await backup_repository.import_entries(
        user_id=user_id,
        payloads=[EntryPayload(title="a", category_name="Math", tags=["t"]), EntryPayload(title="b")],
    )
    assert imported == 2

    removed = await backup_repository.clear_all(user_id=user_id)

    assert removed == {"entries": 2, "categories": 1, "tags": 1}
    rows, total = await repository.list_entries(user_id=user_id, filters=EntryFilters(), page=PageRequest())
    assert total == 0
