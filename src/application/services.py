"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services. Use
cases import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from src.config import get_logger, get_settings
from src.core.services import InsightActionDispatcher, InsightAggregator

logger = get_logger(__name__)

# Singleton service instances
_insight_aggregator: InsightAggregator | None = None
_action_dispatcher: InsightActionDispatcher | None = None


async def get_insight_aggregator() -> InsightAggregator:
    """
    Get or create the InsightAggregator.

    Wires the SQLite stores, the Open-Meteo weather provider and, when
    inference is enabled, the configured LLM provider.
    """
    global _insight_aggregator

    if _insight_aggregator is not None:
        return _insight_aggregator

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.llm import get_optional_llm_provider
    from src.infrastructure.storage.sqlite import (
        get_farm_store,
        get_pest_prediction_store,
        get_task_recommendation_store,
    )
    from src.infrastructure.weather import get_weather_provider

    settings = get_settings()
    _insight_aggregator = InsightAggregator(
        farm_store=await get_farm_store(),
        pest_provider=await get_pest_prediction_store(),
        task_provider=await get_task_recommendation_store(),
        weather_provider=get_weather_provider(),
        llm=get_optional_llm_provider(),
        settings=settings.insights,
    )
    logger.info("insight_aggregator_created", llm_enabled=settings.llm.enabled)
    return _insight_aggregator


async def get_action_dispatcher() -> InsightActionDispatcher:
    """Get or create the InsightActionDispatcher backed by the task store."""
    global _action_dispatcher

    if _action_dispatcher is not None:
        return _action_dispatcher

    from src.infrastructure.storage.sqlite import get_task_recommendation_store

    _action_dispatcher = InsightActionDispatcher(
        task_scheduler=await get_task_recommendation_store(),
        strict=get_settings().insights.strict_actions,
    )
    return _action_dispatcher


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _insight_aggregator, _action_dispatcher
    _insight_aggregator = None
    _action_dispatcher = None
