"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.llm import (
    HealthStatus,
    ILLMProvider,
    LLMResponse,
)
from src.core.interfaces.providers import (
    IPestPredictionProvider,
    ITaskRecommendationProvider,
    ITaskScheduler,
    IWeatherProvider,
)
from src.core.interfaces.storage import IFarmStore

__all__ = [
    # LLM interfaces
    "ILLMProvider",
    "LLMResponse",
    "HealthStatus",
    # Storage interfaces
    "IFarmStore",
    # Signal provider interfaces
    "IPestPredictionProvider",
    "ITaskRecommendationProvider",
    "IWeatherProvider",
    "ITaskScheduler",
]
