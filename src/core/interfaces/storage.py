"""
Abstract interface for the farm record store.

The insight engine only reads: farm context, expense windows, and recent
field activities.
"""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.farm import ActivityRecord, ExpenseRecord, FarmContext


class IFarmStore(ABC):
    """Read-only access to farm records."""

    @abstractmethod
    async def get_farm(self, farm_id: int) -> FarmContext | None:
        """Get farm context by ID, None when the farm does not exist."""
        pass

    @abstractmethod
    async def list_expenses(
        self,
        farm_id: int,
        start: date,
        end: date | None = None,
    ) -> list[ExpenseRecord]:
        """
        List expenses dated in [start, end).

        Args:
            farm_id: Farm to read
            start: Inclusive lower bound
            end: Exclusive upper bound, open-ended when None
        """
        pass

    @abstractmethod
    async def list_recent_activities(
        self,
        farm_id: int,
        since: date,
        per_kind: int = 5,
        limit: int = 10,
    ) -> list[ActivityRecord]:
        """
        List recent irrigation, spray and fertigation activities.

        At most `per_kind` records of each kind dated on or after `since`,
        merged newest first and capped at `limit`.
        """
        pass
