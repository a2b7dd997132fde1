"""Insight entity: the unified, ranked signal record shown to farmers."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InsightType(str, Enum):
    """Closed set of insight categories."""

    PEST_ALERT = "pest_alert"
    TASK_RECOMMENDATION = "task_recommendation"
    WEATHER_ADVISORY = "weather_advisory"
    FINANCIAL_INSIGHT = "financial_insight"
    GROWTH_OPTIMIZATION = "growth_optimization"
    MARKET_INTELLIGENCE = "market_intelligence"


class InsightPriority(str, Enum):
    """Insight priority, critical being the most severe."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Severity rank, lower sorts first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[InsightPriority, int] = {
    InsightPriority.CRITICAL: 0,
    InsightPriority.HIGH: 1,
    InsightPriority.MEDIUM: 2,
    InsightPriority.LOW: 3,
}


class ActionType(str, Enum):
    """Action class an insight's button triggers."""

    NAVIGATE = "navigate"
    EXECUTE = "execute"
    VIEW = "view"


class InsightSource(str, Enum):
    """Which tier produced the insight."""

    DIRECT = "direct"
    ENHANCED = "enhanced"
    BASIC = "basic"


class Insight(BaseModel):
    """
    A single recommendation or alert for one farm.

    Ephemeral and immutable: built by the normalizer right after a provider
    call returns, never persisted, never mutated (use model_copy to derive
    a changed copy).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: InsightType
    priority: InsightPriority
    title: str
    subtitle: str
    description: str | None = None
    icon: str = "Info"
    action_label: str
    action_type: ActionType
    action_data: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(ge=0.0, le=1.0)
    time_relevant: bool = False
    expires_at: datetime | None = None
    tags: frozenset[str] = Field(default_factory=frozenset)
    data: dict[str, Any] = Field(default_factory=dict)
    source: InsightSource = InsightSource.DIRECT

    def is_expired(self, now: datetime) -> bool:
        """True when expires_at is set and not after `now`."""
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        # Naive timestamps are stored as UTC
        if expires_at.tzinfo is None and now.tzinfo is not None:
            expires_at = expires_at.replace(tzinfo=UTC)
        elif now.tzinfo is None and expires_at.tzinfo is not None:
            now = now.replace(tzinfo=UTC)
        return expires_at <= now
