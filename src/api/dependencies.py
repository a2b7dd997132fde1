"""
Dependency injection container for FastAPI.

Provides use case and provider instances to route handlers.
"""

from functools import lru_cache

from src.application.use_cases import ExecuteInsightActionUseCase, GetFarmInsightsUseCase
from src.config import Settings, get_settings
from src.core.interfaces import ILLMProvider
from src.infrastructure.llm import get_llm_provider


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Use case dependencies
def get_farm_insights_use_case() -> GetFarmInsightsUseCase:
    """Get farm insights use case (services resolved lazily on first call)."""
    return GetFarmInsightsUseCase()


def get_execute_action_use_case() -> ExecuteInsightActionUseCase:
    """Get insight action use case."""
    return ExecuteInsightActionUseCase()


# Provider dependencies
def get_llm() -> ILLMProvider:
    """Get the configured LLM provider."""
    return get_llm_provider()
