"""Tests for InsightActionDispatcher."""

from unittest.mock import AsyncMock

import pytest

from src.core.entities.insight import ActionType, InsightType
from src.core.exceptions import TaskNotFoundError
from src.core.interfaces.providers import ITaskScheduler
from src.core.services.insight_actions import InsightActionDispatcher


@pytest.fixture
def scheduler() -> AsyncMock:
    return AsyncMock(spec=ITaskScheduler)


@pytest.fixture
def task_insight(make_insight):
    return make_insight(
        "task_17",
        type=InsightType.TASK_RECOMMENDATION,
        action_type=ActionType.EXECUTE,
        action_data={"task_id": "17", "task_type": "irrigation"},
    )


class TestInsightActionDispatcher:
    async def test_navigate(self, make_insight):
        result = await InsightActionDispatcher().execute(make_insight())
        assert result.success is True
        assert result.message == "Navigating to details"

    async def test_view(self, make_insight):
        result = await InsightActionDispatcher().execute(make_insight(action_type=ActionType.VIEW))
        assert result.success is True
        assert result.message == "Opening insight details"

    async def test_execute_schedules_task(self, scheduler, task_insight):
        result = await InsightActionDispatcher(scheduler).execute(task_insight)

        assert result.success is True
        assert result.message == "Task scheduled for execution"
        scheduler.schedule_task.assert_awaited_once_with("17")

    async def test_execute_without_scheduler(self, task_insight):
        result = await InsightActionDispatcher().execute(task_insight)
        assert result.success is False
        assert result.message == "Task scheduling is not available"

    async def test_scheduler_failure_reported(self, scheduler, task_insight):
        scheduler.schedule_task.side_effect = TaskNotFoundError("17")

        result = await InsightActionDispatcher(scheduler).execute(task_insight)

        assert result.success is False
        assert result.message == "Action failed"

    async def test_execute_on_non_task_strict(self, scheduler, make_insight):
        insight = make_insight(action_type=ActionType.EXECUTE)

        result = await InsightActionDispatcher(scheduler).execute(insight)

        assert result.success is False
        assert result.message == "Execute action is not supported for pest_alert insights"
        scheduler.schedule_task.assert_not_called()

    async def test_execute_on_non_task_lenient(self, scheduler, make_insight):
        insight = make_insight(action_type=ActionType.EXECUTE)

        result = await InsightActionDispatcher(scheduler, strict=False).execute(insight)

        assert result.success is True
        assert result.message == "Action executed"

    async def test_task_without_task_id_strict(self, scheduler, make_insight):
        insight = make_insight(
            type=InsightType.TASK_RECOMMENDATION,
            action_type=ActionType.EXECUTE,
        )
        result = await InsightActionDispatcher(scheduler).execute(insight)
        assert result.success is False
        scheduler.schedule_task.assert_not_called()
