"""
Abstract interfaces for signal providers and the task scheduler.

Each provider exposes one narrow query keyed by farm; any of them may raise.
"""

from abc import ABC, abstractmethod

from src.core.entities.signals import PestPrediction, TaskRecommendation, WeatherSnapshot


class IPestPredictionProvider(ABC):
    """Scored pest/disease prediction feed."""

    @abstractmethod
    async def get_active_predictions(self, farm_id: int) -> list[PestPrediction]:
        """Get active predictions for a farm."""
        pass


class ITaskRecommendationProvider(ABC):
    """Smart task recommendation feed."""

    @abstractmethod
    async def get_active_recommendations(self, farm_id: int) -> list[TaskRecommendation]:
        """Get pending, unexpired recommendations for a farm."""
        pass


class IWeatherProvider(ABC):
    """Current weather lookup."""

    @abstractmethod
    async def get_current_weather(
        self,
        region: str | None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> WeatherSnapshot:
        """
        Get current conditions for a farm location.

        Coordinates take precedence over the region name when both are given.
        """
        pass


class ITaskScheduler(ABC):
    """Schedules a recommended task for execution."""

    @abstractmethod
    async def schedule_task(self, task_id: str) -> None:
        """
        Mark a recommended task as scheduled.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        pass
