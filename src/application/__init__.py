"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from src.application.dto.requests import FarmInsightsRequest, InsightActionRequest
from src.application.dto.responses import (
    ErrorResponse,
    FarmInsightsResponse,
    HealthResponse,
    InsightActionResponse,
    InsightCategoriesResponse,
    InsightResponse,
    ProviderHealthResponse,
)
from src.application.services import (
    get_action_dispatcher,
    get_insight_aggregator,
    reset_services,
)
from src.application.use_cases import (
    ExecuteInsightActionUseCase,
    GetFarmInsightsUseCase,
)

__all__ = [
    # Request DTOs
    "FarmInsightsRequest",
    "InsightActionRequest",
    # Response DTOs
    "InsightResponse",
    "FarmInsightsResponse",
    "InsightCategoriesResponse",
    "InsightActionResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
    # Use Cases
    "GetFarmInsightsUseCase",
    "ExecuteInsightActionUseCase",
    # Service factories
    "get_insight_aggregator",
    "get_action_dispatcher",
    "reset_services",
]
