"""Application use cases."""

from src.application.use_cases.execute_insight_action import ExecuteInsightActionUseCase
from src.application.use_cases.get_farm_insights import GetFarmInsightsUseCase

__all__ = [
    "GetFarmInsightsUseCase",
    "ExecuteInsightActionUseCase",
]
