"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.insight_actions import ActionResult, InsightActionDispatcher
from src.core.services.insight_aggregator import AggregationReport, InsightAggregator
from src.core.services.insight_ranking import (
    compare_insights,
    rank_and_truncate,
    rank_insights,
    ranking_key,
)
from src.core.services.signal_adapter import (
    AnalysisResult,
    BasicAnalyzer,
    EnhancedAnalyzer,
    OutcomeKind,
    SignalAdapter,
    SignalOutcome,
)

__all__ = [
    # Aggregation
    "InsightAggregator",
    "AggregationReport",
    # Ranking
    "ranking_key",
    "rank_insights",
    "rank_and_truncate",
    "compare_insights",
    # Enhancement/fallback
    "SignalAdapter",
    "SignalOutcome",
    "OutcomeKind",
    "AnalysisResult",
    "EnhancedAnalyzer",
    "BasicAnalyzer",
    # Actions
    "InsightActionDispatcher",
    "ActionResult",
]
