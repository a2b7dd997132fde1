"""Tests for provider records and inference payload models."""

from datetime import date

import pytest
from pydantic import ValidationError

from src.core.entities.farm import ActivityRecord, ActivityType, ExpenseRecord
from src.core.entities.signals import (
    FinancialAnalysis,
    GrowthAnalysis,
    PestPrediction,
    RiskLevel,
    WeatherAdvice,
)


class TestProviderRecords:
    def test_pest_prediction_parses_iso_date(self):
        prediction = PestPrediction(
            id="9",
            farm_id=1,
            pest_type="powdery_mildew",
            risk_level="high",
            probability_score=0.8,
            predicted_onset_date="2026-03-05",
        )
        assert prediction.risk_level == RiskLevel.HIGH
        assert prediction.predicted_onset_date == date(2026, 3, 5)

    def test_pest_prediction_rejects_unknown_risk(self):
        with pytest.raises(ValidationError):
            PestPrediction(
                id="9",
                farm_id=1,
                pest_type="thrips",
                risk_level="extreme",
                probability_score=0.8,
                predicted_onset_date="2026-03-05",
            )

    def test_expense_and_activity_records(self):
        expense = ExpenseRecord(farm_id=1, date="2026-02-10", cost=1500)
        activity = ActivityRecord(id=3, activity_type="spray", date="2026-02-11")
        assert expense.type == "other"
        assert expense.cost == 1500.0
        assert activity.activity_type == ActivityType.SPRAY
        assert activity.notes == ""


class TestWeatherAdvice:
    def test_camel_case_aliases(self):
        advice = WeatherAdvice.model_validate(
            {
                "priority": "HIGH",
                "title": "Rain Expected",
                "subtitle": "Delay spraying until Friday",
                "confidence": 0.9,
                "timeRelevant": True,
                "actionLabel": "Reschedule Spray",
            }
        )
        assert advice.priority == "high"
        assert advice.time_relevant is True
        assert advice.action_label == "Reschedule Spray"

    def test_snake_case_names_accepted(self):
        advice = WeatherAdvice.model_validate({"time_relevant": True, "action_label": "Go"})
        assert advice.time_relevant is True
        assert advice.action_label == "Go"

    def test_unknown_priority_defaults_to_medium(self):
        assert WeatherAdvice.model_validate({"priority": "urgent"}).priority == "medium"

    def test_blank_text_falls_back_to_defaults(self):
        advice = WeatherAdvice.model_validate({"title": "  ", "subtitle": None})
        assert advice.title == "Weather Advisory"
        assert advice.subtitle == "Check current conditions"


class TestFinancialAnalysis:
    def test_full_payload(self):
        analysis = FinancialAnalysis.model_validate(
            {
                "trend": "Increasing",
                "varianceFromAverage": 34.5,
                "recommendation": "Review fertilizer purchases",
                "confidence": 0.85,
                "nextReviewDate": "2026-04-01",
                "riskFactors": ["Fertilizer prices up", "", "Labour shortage"],
            }
        )
        assert analysis.trend == "increasing"
        assert analysis.variance_from_average == 34.5
        assert analysis.next_review_date == date(2026, 4, 1)
        assert analysis.risk_factors == ["Fertilizer prices up", "Labour shortage"]

    def test_confidence_required(self):
        with pytest.raises(ValidationError):
            FinancialAnalysis.model_validate({"trend": "stable"})

    def test_lenient_fields(self):
        analysis = FinancialAnalysis.model_validate(
            {
                "trend": "sideways",
                "confidence": 0.7,
                "nextReviewDate": "next month",
                "riskFactors": "none",
            }
        )
        assert analysis.trend == "stable"
        assert analysis.next_review_date is None
        assert analysis.risk_factors == []


class TestGrowthAnalysis:
    def test_stage_required_and_non_empty(self):
        with pytest.raises(ValidationError):
            GrowthAnalysis.model_validate({"confidence": 0.8})
        with pytest.raises(ValidationError):
            GrowthAnalysis.model_validate({"stage": "", "confidence": 0.8})

    def test_aliases_and_defaults(self):
        analysis = GrowthAnalysis.model_validate(
            {"stage": "flowering", "confidence": 0.9, "timeRelevant": True}
        )
        assert analysis.time_relevant is True
        assert analysis.recommendations == []
        assert analysis.description == "AI analysis of current growth stage"
