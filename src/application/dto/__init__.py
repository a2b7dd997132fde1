"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
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

__all__ = [
    # Requests
    "FarmInsightsRequest",
    "InsightActionRequest",
    # Responses
    "InsightResponse",
    "FarmInsightsResponse",
    "InsightCategoriesResponse",
    "InsightActionResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
