"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.core.entities.insight import Insight


class InsightResponse(BaseModel):
    """One insight card."""

    id: str
    type: str = Field(..., description="Insight category")
    priority: str = Field(..., description="critical, high, medium or low")
    title: str
    subtitle: str
    description: str | None = None
    icon: str = Field(..., description="Display icon name")
    action_label: str
    action_type: str = Field(..., description="navigate, execute or view")
    action_data: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(..., ge=0.0, le=1.0)
    time_relevant: bool
    expires_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    source: str = Field(..., description="direct, enhanced or basic")

    @classmethod
    def from_entity(cls, insight: Insight) -> "InsightResponse":
        """Convert an Insight entity to its response shape."""
        return cls(
            id=insight.id,
            type=insight.type.value,
            priority=insight.priority.value,
            title=insight.title,
            subtitle=insight.subtitle,
            description=insight.description,
            icon=insight.icon,
            action_label=insight.action_label,
            action_type=insight.action_type.value,
            action_data=insight.action_data,
            confidence=insight.confidence,
            time_relevant=insight.time_relevant,
            expires_at=insight.expires_at,
            tags=sorted(insight.tags),
            data=insight.data,
            source=insight.source.value,
        )


class FarmInsightsResponse(BaseModel):
    """Ranked insight feed for a farm."""

    farm_id: int
    total: int
    insights: list[InsightResponse] = Field(default_factory=list)


class InsightCategoriesResponse(BaseModel):
    """Insights grouped by category."""

    farm_id: int
    categories: dict[str, list[InsightResponse]] = Field(default_factory=dict)


class InsightActionResponse(BaseModel):
    """Result of pressing an insight's action button."""

    success: bool
    message: str


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    model: str | None = None
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    llm: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. FARM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
