"""Core domain entities."""

from src.core.entities.farm import (
    ActivityRecord,
    ActivityType,
    ExpenseRecord,
    FarmContext,
)
from src.core.entities.insight import (
    ActionType,
    Insight,
    InsightPriority,
    InsightSource,
    InsightType,
)
from src.core.entities.signals import (
    FinancialAnalysis,
    GrowthAnalysis,
    PestPrediction,
    RiskLevel,
    TaskRecommendation,
    WeatherAdvice,
    WeatherSnapshot,
)

__all__ = [
    # Insight entities
    "Insight",
    "InsightType",
    "InsightPriority",
    "InsightSource",
    "ActionType",
    # Farm entities
    "FarmContext",
    "ExpenseRecord",
    "ActivityRecord",
    "ActivityType",
    # Signal records
    "PestPrediction",
    "RiskLevel",
    "TaskRecommendation",
    "WeatherSnapshot",
    # Inference payloads
    "WeatherAdvice",
    "FinancialAnalysis",
    "GrowthAnalysis",
]
