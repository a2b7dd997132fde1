"""
Provider-native signal records and inference payloads.

Records returned by the signal providers, plus the validated shapes of the
inference service's JSON answers. The normalizer maps all of them into
Insight.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RiskLevel(str, Enum):
    """Pest/disease risk level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PestPrediction(BaseModel):
    """Scored pest/disease prediction for a farm."""

    id: str
    farm_id: int
    pest_type: str
    risk_level: RiskLevel
    probability_score: float
    predicted_onset_date: date


class TaskRecommendation(BaseModel):
    """Recommended field task with its priority and confidence scores."""

    id: str
    farm_id: int
    task_type: str
    priority_score: float
    confidence_score: float
    reasoning: str = ""
    weather_dependent: bool = False
    expires_at: datetime | None = None


class WeatherSnapshot(BaseModel):
    """Current weather conditions at a farm."""

    temperature: float
    humidity: float
    wind_speed: float = 0.0  # km/h
    precipitation: float = 0.0  # mm
    observed_at: datetime | None = None


# --- Inference payloads ---

_PRIORITIES = ("critical", "high", "medium", "low")


class _InferencePayload(BaseModel):
    """Base for inference answers; accepts camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WeatherAdvice(_InferencePayload):
    """One weather advisory item from the inference service."""

    priority: str = "medium"
    title: str = "Weather Advisory"
    subtitle: str = "Check current conditions"
    confidence: float = 0.5
    time_relevant: bool = Field(default=False, alias="timeRelevant")
    action_label: str = Field(default="View Details", alias="actionLabel")

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, v: Any) -> str:
        if isinstance(v, str) and v.lower() in _PRIORITIES:
            return v.lower()
        return "medium"

    @model_validator(mode="before")
    @classmethod
    def drop_blank_text(cls, data: Any) -> Any:
        # Blank text fields fall back to the field defaults
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if not (value is None or (isinstance(value, str) and not value.strip()))
        }


class FinancialAnalysis(_InferencePayload):
    """Spending trend analysis from the inference service."""

    trend: Literal["increasing", "decreasing", "stable"] = "stable"
    variance_from_average: float = Field(default=0.0, alias="varianceFromAverage")
    recommendation: str = "Monitor expenses regularly"
    confidence: float
    next_review_date: date | None = Field(default=None, alias="nextReviewDate")
    risk_factors: list[str] = Field(default_factory=list, alias="riskFactors")

    @field_validator("trend", mode="before")
    @classmethod
    def coerce_trend(cls, v: Any) -> str:
        if isinstance(v, str) and v.lower() in ("increasing", "decreasing", "stable"):
            return v.lower()
        return "stable"

    @field_validator("next_review_date", mode="before")
    @classmethod
    def lenient_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return date.fromisoformat(v[:10])
            except ValueError:
                return None
        return v

    @field_validator("risk_factors", mode="before")
    @classmethod
    def only_text_risks(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [str(item) for item in v if str(item).strip()]


class GrowthAnalysis(_InferencePayload):
    """Growth stage assessment from the inference service."""

    stage: str = Field(min_length=1)
    confidence: float
    recommendations: list[str] = Field(default_factory=list)
    time_relevant: bool = Field(default=False, alias="timeRelevant")
    next_stage_date: date | None = Field(default=None, alias="nextStageDate")
    description: str = "AI analysis of current growth stage"

    @field_validator("next_stage_date", mode="before")
    @classmethod
    def lenient_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return date.fromisoformat(v[:10])
            except ValueError:
                return None
        return v

    @field_validator("recommendations", mode="before")
    @classmethod
    def only_text_recommendations(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [str(item) for item in v if str(item).strip()]
