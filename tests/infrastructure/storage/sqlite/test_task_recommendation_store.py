"""Tests for SQLiteTaskRecommendationStore."""

import aiosqlite
import pytest

from src.core.exceptions import TaskNotFoundError
from src.infrastructure.storage.sqlite.task_recommendation_store import (
    SQLiteTaskRecommendationStore,
)

INSERT_TASK = """
    INSERT INTO ai_task_recommendations
        (farm_id, task_type, priority_score, confidence_score, weather_dependent,
         reasoning, status, expires_at)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""


async def _status(db_path, task_id: int) -> str:
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute(
            "SELECT status FROM ai_task_recommendations WHERE id = ?", (task_id,)
        )
        row = await cursor.fetchone()
        return row[0]


class TestGetActiveRecommendations:
    """Tests for reading the recommendation feed."""

    @pytest.fixture(autouse=True)
    def _setup(self, store_db):
        self.store = SQLiteTaskRecommendationStore()

    async def test_pending_ordered_by_priority(self, farm_id, execute_sql):
        await execute_sql(
            INSERT_TASK,
            (farm_id, "pruning", 0.4, 0.6, 0, "Canes ready", "pending", None),
        )
        irrigation_id = await execute_sql(
            INSERT_TASK,
            (farm_id, "irrigation", 0.9, 0.85, 1, "Soil moisture low", "pending", None),
        )

        tasks = await self.store.get_active_recommendations(farm_id)

        assert [t.task_type for t in tasks] == ["irrigation", "pruning"]
        first = tasks[0]
        assert first.id == str(irrigation_id)
        assert first.weather_dependent is True
        assert first.reasoning == "Soil moisture low"
        assert first.expires_at is None
        assert tasks[1].weather_dependent is False

    async def test_non_pending_excluded(self, farm_id, execute_sql):
        for status in ("scheduled", "accepted", "rejected", "completed"):
            await execute_sql(
                INSERT_TASK, (farm_id, "spraying", 0.8, 0.8, 0, None, status, None)
            )

        assert await self.store.get_active_recommendations(farm_id) == []

    async def test_expired_excluded(self, farm_id, execute_sql):
        await execute_sql(
            INSERT_TASK,
            (farm_id, "harvest", 0.7, 0.7, 0, None, "pending", "2020-01-01T00:00:00"),
        )
        await execute_sql(
            INSERT_TASK,
            (farm_id, "irrigation", 0.6, 0.7, 0, None, "pending", "2099-01-01T00:00:00+00:00"),
        )

        tasks = await self.store.get_active_recommendations(farm_id)

        assert [t.task_type for t in tasks] == ["irrigation"]
        assert tasks[0].expires_at is not None
        assert tasks[0].expires_at.tzinfo is not None

    async def test_missing_reasoning_is_empty(self, farm_id, execute_sql):
        await execute_sql(
            INSERT_TASK, (farm_id, "fertigation", 0.5, 0.5, 0, None, "pending", None)
        )

        tasks = await self.store.get_active_recommendations(farm_id)

        assert tasks[0].reasoning == ""


class TestScheduleTask:
    """Tests for scheduling a recommendation."""

    @pytest.fixture(autouse=True)
    def _setup(self, store_db):
        self.store = SQLiteTaskRecommendationStore()
        self.db_path = store_db

    async def test_schedule_task(self, farm_id, execute_sql):
        task_id = await execute_sql(
            INSERT_TASK, (farm_id, "irrigation", 0.9, 0.9, 0, None, "pending", None)
        )

        await self.store.schedule_task(str(task_id))

        assert await _status(self.db_path, task_id) == "scheduled"
        assert await self.store.get_active_recommendations(farm_id) == []

    async def test_schedule_unknown_task(self):
        with pytest.raises(TaskNotFoundError):
            await self.store.schedule_task("9999")

    @pytest.mark.parametrize("task_id", ["abc", "", "task_1"])
    async def test_schedule_non_numeric_id(self, task_id):
        with pytest.raises(TaskNotFoundError):
            await self.store.schedule_task(task_id)
