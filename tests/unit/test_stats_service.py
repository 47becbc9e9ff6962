"""
Unit tests for dashboard stats assembly.
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, patch

import asyncpg
import pytest
from fastapi import HTTPException

from stats import service
from tests.factories import TEST_USER_ID


def snapshot(today: date, **overrides) -> dict:
    data = {
        "total": 4,
        "revision": 1,
        "learning_dates": [today, today - timedelta(days=1), today - timedelta(days=3)],
        "categories": [
            {"name": "Math", "count": 2},
            {"name": None, "count": 1},
            {"name": "General", "count": 1},
        ],
        "activity": [{"learning_date": today, "count": 2}],
        "heatmap": [
            {"learning_date": today - timedelta(days=3), "count": 1},
            {"learning_date": today, "count": 2},
        ],
    }
    data.update(overrides)
    return data


class TestParseToday:
    """Tests for parse_today."""

    def test_valid(self) -> None:
        assert service.parse_today("2024-05-15") == date(2024, 5, 15)

    def test_datetime_string_is_truncated(self) -> None:
        assert service.parse_today("2024-05-15T23:00:00") == date(2024, 5, 15)

    @pytest.mark.parametrize(
        "raw",
        [pytest.param(None, id="missing"), pytest.param("", id="blank"), pytest.param("15/05", id="bad")],
    )
    def test_falls_back(self, raw) -> None:
        assert service.parse_today(raw, fallback=date(2020, 1, 1)) == date(2020, 1, 1)


class TestGetStats:
    """Tests for get_stats."""

    @pytest.mark.asyncio
    async def test_assembles_dashboard(self, today: date) -> None:
        mock_fetch = AsyncMock(return_value=snapshot(today))
        with patch("stats.service.repository.fetch_stats_snapshot", new=mock_fetch):
            out = await service.get_stats(user_id=TEST_USER_ID, today=today)

        assert out["total"] == 4
        assert out["revision"] == 1
        assert out["streak"] == 2
        assert out["categories"] == [{"name": "General", "count": 2}, {"name": "Math", "count": 2}]
        assert out["activity"] == [{"learning_date": "2024-05-15", "count": 2}]
        assert out["heatmap"][0] == {"learning_date": "2024-05-12", "count": 1}

    @pytest.mark.asyncio
    async def test_merged_general_keeps_count_order(self, today: date) -> None:
        categories = [
            {"name": "Math", "count": 4},
            {"name": "General", "count": 3},
            {"name": None, "count": 2},
        ]
        mock_fetch = AsyncMock(return_value=snapshot(today, categories=categories))
        with patch("stats.service.repository.fetch_stats_snapshot", new=mock_fetch):
            out = await service.get_stats(user_id=TEST_USER_ID, today=today)

        assert out["categories"] == [{"name": "General", "count": 5}, {"name": "Math", "count": 4}]

    @pytest.mark.asyncio
    async def test_windows_end_on_today(self, today: date) -> None:
        mock_fetch = AsyncMock(return_value=snapshot(today))
        with patch("stats.service.repository.fetch_stats_snapshot", new=mock_fetch):
            await service.get_stats(user_id=TEST_USER_ID, today=today)

        kwargs = mock_fetch.await_args.kwargs
        assert kwargs["today"] == today
        assert kwargs["activity_start"] == today - timedelta(days=6)
        assert kwargs["heatmap_start"] == today - timedelta(days=364)

    @pytest.mark.asyncio
    async def test_empty_journal(self, today: date) -> None:
        empty = snapshot(today, total=0, revision=0, learning_dates=[], categories=[], activity=[], heatmap=[])
        with patch("stats.service.repository.fetch_stats_snapshot", new=AsyncMock(return_value=empty)):
            out = await service.get_stats(user_id=TEST_USER_ID, today=today)

        assert out == {
            "total": 0,
            "revision": 0,
            "streak": 0,
            "categories": [],
            "activity": [],
            "heatmap": [],
        }

    @pytest.mark.asyncio
    async def test_db_error_is_500(self, today: date) -> None:
        failing = AsyncMock(side_effect=asyncpg.PostgresError("down"))
        with patch("stats.service.repository.fetch_stats_snapshot", new=failing):
            with pytest.raises(HTTPException) as exc_info:
                await service.get_stats(user_id=TEST_USER_ID, today=today)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to fetch stats."
