"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class FarmInsightsRequest(BaseModel):
    """Request for a farm's ranked insight feed."""

    farm_id: int = Field(..., ge=1, description="Farm to analyze", examples=[42])
    user_id: str | None = Field(
        default=None,
        description="Requesting user (accepted for auditing, not used for filtering)",
    )
    limit: int = Field(default=10, ge=0, le=100, description="Maximum insights to return")


class InsightActionRequest(BaseModel):
    """An insight as shown to the client, submitted when its button is pressed.

    Only the fields the dispatcher needs are required; everything else is
    accepted so clients can post back the insight they received.
    """

    id: str = Field(..., description="Insight ID", examples=["task_17"])
    type: str = Field(..., description="Insight type", examples=["task_recommendation"])
    action_type: str = Field(..., description="navigate, execute or view", examples=["execute"])
    action_data: dict[str, Any] = Field(default_factory=dict)
    priority: str = Field(default="medium")
    title: str = Field(default="")
    subtitle: str = Field(default="")
    action_label: str = Field(default="")
    confidence: float = Field(default=0.0)
    time_relevant: bool = Field(default=False)
    expires_at: datetime | None = Field(default=None)
    tags: list[str] = Field(default_factory=list)
