"""Tests for the Insight entity."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.core.entities.insight import (
    ActionType,
    Insight,
    InsightPriority,
    InsightSource,
    InsightType,
)


class TestInsightEntity:
    """Tests for Insight model."""

    def test_construction_all_fields(self):
        expires = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        insight = Insight(
            id="task_17",
            type=InsightType.TASK_RECOMMENDATION,
            priority=InsightPriority.HIGH,
            title="Irrigation Recommended",
            subtitle="Soil moisture below threshold",
            description="Soil moisture below threshold after three dry days",
            icon="Droplets",
            action_label="Execute Now",
            action_type=ActionType.EXECUTE,
            action_data={"task_id": "17"},
            confidence=0.85,
            time_relevant=True,
            expires_at=expires,
            tags=frozenset({"task", "irrigation"}),
            data={"priority_score": 0.85},
            source=InsightSource.DIRECT,
        )
        assert insight.type == InsightType.TASK_RECOMMENDATION
        assert insight.action_data["task_id"] == "17"
        assert insight.expires_at == expires
        assert "irrigation" in insight.tags

    def test_defaults(self, make_insight):
        insight = make_insight()
        assert insight.icon == "Info"
        assert insight.description is None
        assert insight.time_relevant is False
        assert insight.expires_at is None
        assert insight.tags == frozenset()
        assert insight.data == {}
        assert insight.source == InsightSource.DIRECT

    def test_enum_values(self):
        assert {t.value for t in InsightType} == {
            "pest_alert",
            "task_recommendation",
            "weather_advisory",
            "financial_insight",
            "growth_optimization",
            "market_intelligence",
        }
        assert ActionType.EXECUTE.value == "execute"

    def test_priority_rank_order(self):
        ranks = [p.rank for p in (InsightPriority.CRITICAL, InsightPriority.HIGH,
                                  InsightPriority.MEDIUM, InsightPriority.LOW)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    @pytest.mark.parametrize("confidence", [-0.1, 1.01])
    def test_confidence_out_of_range_rejected(self, make_insight, confidence):
        with pytest.raises(ValidationError):
            make_insight(confidence=confidence)

    def test_unknown_type_rejected(self, make_insight):
        with pytest.raises(ValidationError):
            make_insight(type="soil_report")

    def test_frozen(self, make_insight):
        insight = make_insight()
        with pytest.raises(ValidationError):
            insight.title = "changed"

    def test_model_copy_derives_new_insight(self, make_insight):
        insight = make_insight(tags=frozenset({"pest"}))
        copy = insight.model_copy(update={"tags": insight.tags | {"ai"}})
        assert copy.tags == {"pest", "ai"}
        assert insight.tags == {"pest"}


class TestInsightExpiry:
    NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def test_no_expiry_never_expires(self, make_insight):
        assert make_insight().is_expired(self.NOW) is False

    def test_future_expiry(self, make_insight):
        insight = make_insight(expires_at=self.NOW + timedelta(hours=1))
        assert insight.is_expired(self.NOW) is False

    def test_past_expiry(self, make_insight):
        insight = make_insight(expires_at=self.NOW - timedelta(seconds=1))
        assert insight.is_expired(self.NOW) is True

    def test_expiry_at_now_counts_as_expired(self, make_insight):
        assert make_insight(expires_at=self.NOW).is_expired(self.NOW) is True

    def test_naive_expiry_treated_as_utc(self, make_insight):
        insight = make_insight(expires_at=datetime(2026, 3, 1, 11, 0))
        assert insight.is_expired(self.NOW) is True
        assert insight.is_expired(datetime(2026, 3, 1, 10, 0, tzinfo=UTC)) is False
