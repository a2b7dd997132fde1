"""
SQLite implementation of the farm record store.

Reads farm context, expense windows and recent activity logs.
"""

from datetime import date

import aiosqlite

from src.config import get_logger
from src.core.entities.farm import ActivityRecord, ActivityType, ExpenseRecord, FarmContext
from src.core.interfaces.storage import IFarmStore
from src.infrastructure.storage.sqlite.connection import fetch_all, fetch_one

logger = get_logger(__name__)

# Activity kind -> record table
ACTIVITY_TABLES: dict[ActivityType, str] = {
    ActivityType.IRRIGATION: "irrigation_records",
    ActivityType.SPRAY: "spray_records",
    ActivityType.FERTIGATION: "fertigation_records",
}


class SQLiteFarmStore(IFarmStore):
    """SQLite implementation of farm record reads."""

    async def get_farm(self, farm_id: int) -> FarmContext | None:
        """Get farm context by ID."""
        row = await fetch_one("get_farm", "SELECT * FROM farms WHERE id = ?", (farm_id,))
        if row is None:
            return None
        return self._row_to_farm(row)

    async def list_expenses(
        self,
        farm_id: int,
        start: date,
        end: date | None = None,
    ) -> list[ExpenseRecord]:
        """List expenses dated in [start, end), newest first."""
        query = "SELECT * FROM expense_records WHERE farm_id = ? AND date >= ?"
        params: list = [farm_id, start.isoformat()]
        if end is not None:
            query += " AND date < ?"
            params.append(end.isoformat())
        query += " ORDER BY date DESC, id DESC"

        rows = await fetch_all("list_expenses", query, params)
        return [
            ExpenseRecord(
                id=row["id"],
                farm_id=row["farm_id"],
                date=row["date"],
                type=row["type"] or "other",
                description=row["description"] or "",
                cost=row["cost"] or 0.0,
            )
            for row in rows
        ]

    async def list_recent_activities(
        self,
        farm_id: int,
        since: date,
        per_kind: int = 5,
        limit: int = 10,
    ) -> list[ActivityRecord]:
        """Recent irrigation, spray and fertigation records merged newest first."""
        activities: list[ActivityRecord] = []

        for activity_type, table in ACTIVITY_TABLES.items():
            rows = await fetch_all(
                f"list_{activity_type.value}_records",
                f"""
                SELECT id, date, notes FROM {table}
                WHERE farm_id = ? AND date >= ?
                ORDER BY date DESC, id DESC
                LIMIT ?
                """,
                (farm_id, since.isoformat(), per_kind),
            )
            activities.extend(
                ActivityRecord(
                    id=row["id"],
                    activity_type=activity_type,
                    date=row["date"],
                    notes=row["notes"] or "",
                )
                for row in rows
            )

        activities.sort(key=lambda a: a.date, reverse=True)
        logger.debug("recent_activities_loaded", farm_id=farm_id, count=len(activities))
        return activities[:limit]

    def _row_to_farm(self, row: aiosqlite.Row) -> FarmContext:
        return FarmContext(
            id=row["id"],
            name=row["name"] or "",
            region=row["region"],
            crop=row["crop"],
            crop_variety=row["crop_variety"],
            crop_stage=row["crop_stage"],
            planting_date=row["planting_date"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            area=row["area"],
        )
