"""
SQLite implementation of the smart task recommendation feed.

Also acts as the task scheduler: scheduling a task moves it from
'pending' to 'scheduled'.
"""

from datetime import UTC, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.signals import TaskRecommendation
from src.core.exceptions import DatabaseError, TaskNotFoundError
from src.core.interfaces.providers import ITaskRecommendationProvider, ITaskScheduler
from src.infrastructure.storage.sqlite.connection import fetch_all, get_transaction

logger = get_logger(__name__)


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored timestamp; naive values are UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class SQLiteTaskRecommendationStore(ITaskRecommendationProvider, ITaskScheduler):
    """Reads and schedules rows of ai_task_recommendations."""

    async def get_active_recommendations(self, farm_id: int) -> list[TaskRecommendation]:
        """Pending, unexpired recommendations for a farm, highest priority first."""
        rows = await fetch_all(
            "get_active_recommendations",
            """
            SELECT * FROM ai_task_recommendations
            WHERE farm_id = ? AND status = 'pending'
            ORDER BY priority_score DESC, id ASC
            """,
            (farm_id,),
        )

        now = datetime.now(UTC)
        tasks: list[TaskRecommendation] = []
        for row in rows:
            expires_at = _parse_timestamp(row["expires_at"])
            if expires_at is not None and expires_at <= now:
                continue
            tasks.append(
                TaskRecommendation(
                    id=str(row["id"]),
                    farm_id=row["farm_id"],
                    task_type=row["task_type"],
                    priority_score=row["priority_score"] or 0.0,
                    confidence_score=row["confidence_score"] or 0.0,
                    reasoning=row["reasoning"] or "",
                    weather_dependent=bool(row["weather_dependent"]),
                    expires_at=expires_at,
                )
            )
        return tasks

    async def schedule_task(self, task_id: str) -> None:
        """Mark a recommendation as scheduled."""
        try:
            row_id = int(task_id)
        except (TypeError, ValueError):
            raise TaskNotFoundError(str(task_id)) from None

        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    UPDATE ai_task_recommendations
                    SET status = 'scheduled', updated_at = ?
                    WHERE id = ?
                    """,
                    (datetime.now(UTC).isoformat(), row_id),
                )
            except aiosqlite.Error as e:
                raise DatabaseError("schedule_task", str(e)) from e

            if cursor.rowcount == 0:
                raise TaskNotFoundError(task_id)

        logger.info("task_scheduled", task_id=task_id)
