"""
Insight normalizer.

Pure functions that map provider-native records and inference payloads into
the unified Insight shape. Title and subtitle formatting is deterministic
and locale independent: ASCII-only title casing, fixed number formats, fixed
truncation budget.
"""

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any

from src.core.entities.insight import (
    ActionType,
    Insight,
    InsightPriority,
    InsightType,
)
from src.core.entities.signals import (
    FinancialAnalysis,
    GrowthAnalysis,
    PestPrediction,
    RiskLevel,
    TaskRecommendation,
    WeatherAdvice,
    WeatherSnapshot,
)

SUBTITLE_BUDGET = 60
ELLIPSIS = "..."

# Confidence placeholder for rule-based insights; the signal adapter
# restamps basic-tier output with the configured fallback confidence.
BASIC_CONFIDENCE = 0.6

# Financial risk factors are surfaced only above this confidence
RISK_FACTOR_MIN_CONFIDENCE = 0.8
MAX_RISK_FACTORS = 2


@dataclass(frozen=True)
class Presentation:
    """Display title and icon for a task or insight kind."""

    title: str
    icon: str


TASK_PRESENTATION: Mapping[str, Presentation] = MappingProxyType(
    {
        "irrigation": Presentation("Irrigation Recommended", "Droplets"),
        "spray": Presentation("Protective Spray Due", "SprayCan"),
        "fertigation": Presentation("Nutrition Application", "Zap"),
        "pruning": Presentation("Pruning Required", "Scissors"),
    }
)
DEFAULT_TASK_PRESENTATION = Presentation("Farm Task Pending", "CheckCircle")

INSIGHT_TYPE_PRESENTATION: Mapping[InsightType, Presentation] = MappingProxyType(
    {
        InsightType.PEST_ALERT: Presentation("Pest Alert", "AlertTriangle"),
        InsightType.TASK_RECOMMENDATION: Presentation("Recommended Task", "CheckCircle"),
        InsightType.WEATHER_ADVISORY: Presentation("Weather Advisory", "CloudRain"),
        InsightType.FINANCIAL_INSIGHT: Presentation("Financial Insight", "DollarSign"),
        InsightType.GROWTH_OPTIMIZATION: Presentation("Growth Optimization", "Sprout"),
        InsightType.MARKET_INTELLIGENCE: Presentation("Market Intelligence", "BarChart3"),
    }
)

GROWTH_STAGE_TITLES: Mapping[str, str] = MappingProxyType(
    {
        "bud_break": "Bud Break Stage",
        "leaf_development": "Leaf Development Phase",
        "flowering": "Critical Flowering Stage",
        "fruit_set": "Fruit Set Period",
        "veraison": "Veraison Stage",
        "harvest": "Harvest Time",
        "dormancy": "Dormancy Period",
    }
)

_RISK_TO_PRIORITY: Mapping[RiskLevel, InsightPriority] = MappingProxyType(
    {
        RiskLevel.CRITICAL: InsightPriority.CRITICAL,
        RiskLevel.HIGH: InsightPriority.HIGH,
        RiskLevel.MEDIUM: InsightPriority.MEDIUM,
        RiskLevel.LOW: InsightPriority.LOW,
    }
)

_WORD_START = re.compile(r"\b[a-z]", flags=re.ASCII)


# --- Formatting helpers ---


def normalize_confidence(value: Any) -> float:
    """
    Map a provider confidence onto [0, 1].

    Values already in [0, 1] pass through, values in (1, 100] are treated as
    percentages, anything else is clamped. Non-numeric and NaN map to 0.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    if 1.0 < number <= 100.0:
        number = number / 100.0
    return min(max(number, 0.0), 1.0)


def humanize_identifier(identifier: str) -> str:
    """Turn a snake_case identifier into title case ("downy_mildew" -> "Downy Mildew")."""
    text = " ".join(identifier.replace("_", " ").split())
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)


def truncate_text(text: str, limit: int = SUBTITLE_BUDGET) -> str:
    """Cut text to `limit` characters, marking the cut with an ellipsis."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + ELLIPSIS


def format_number(value: float) -> str:
    """Format a measurement without trailing zeros ("82", "27.5")."""
    if float(value).is_integer():
        return f"{value:.0f}"
    return f"{value:.1f}"


def stage_key(stage: str) -> str:
    """Canonical growth stage key ("Fruit Set" -> "fruit_set")."""
    return re.sub(r"[\s\-]+", "_", stage.strip().lower())


def growth_stage_title(stage: str) -> str:
    """Display title for a growth stage."""
    key = stage_key(stage)
    return GROWTH_STAGE_TITLES.get(key) or f"{humanize_identifier(key)} Stage"


def financial_title(trend: str, variance: float) -> str:
    """Display title for a spending trend and its variance from average (%)."""
    magnitude = abs(variance)
    if trend == "increasing":
        if magnitude > 30:
            return "High Spending Increase Detected"
        if magnitude > 15:
            return "Moderate Spending Increase"
        return "Spending Trending Up"
    if trend == "decreasing":
        if magnitude > 30:
            return "Significant Cost Reduction"
        if magnitude > 15:
            return "Spending Optimization Detected"
        return "Costs Trending Down"
    return "Stable Spending Pattern"


def task_presentation(task_type: str) -> Presentation:
    """Title and icon for a task type."""
    return TASK_PRESENTATION.get(task_type.lower(), DEFAULT_TASK_PRESENTATION)


def build_insight(
    *,
    id: str,
    type: InsightType,
    priority: InsightPriority,
    title: str,
    subtitle: str,
    action_label: str,
    action_type: ActionType,
    confidence: Any,
    tags: Iterable[str] = (),
    icon: str | None = None,
    **fields: Any,
) -> Insight:
    """Construct an Insight with the per-type icon default and a clamped confidence."""
    return Insight(
        id=id,
        type=type,
        priority=priority,
        title=title,
        subtitle=subtitle,
        icon=icon or INSIGHT_TYPE_PRESENTATION[type].icon,
        action_label=action_label,
        action_type=action_type,
        confidence=normalize_confidence(confidence),
        tags=frozenset(tag for tag in tags if tag),
        **fields,
    )


# --- Direct provider records ---


def pest_prediction_to_insight(
    prediction: PestPrediction,
    farm_id: int,
    today: date,
) -> Insight:
    """Map a pest/disease prediction to a pest alert."""
    days_until = (prediction.predicted_onset_date - today).days
    is_critical = prediction.risk_level == RiskLevel.CRITICAL

    return build_insight(
        id=f"pest_{prediction.id}",
        type=InsightType.PEST_ALERT,
        priority=_RISK_TO_PRIORITY[prediction.risk_level],
        title=f"{humanize_identifier(prediction.pest_type)} Risk",
        subtitle=(
            f"Prevention window: {days_until} days"
            if days_until > 0
            else "Immediate action needed"
        ),
        action_label="Apply Treatment" if is_critical else "View Prevention",
        action_type=ActionType.NAVIGATE,
        action_data={
            "route": f"/farms/{farm_id}/pest-alerts",
            "pest_id": prediction.id,
        },
        confidence=prediction.probability_score,
        time_relevant=days_until <= 7,
        tags=("pest", "disease", "prevention"),
        data={
            "pest_type": prediction.pest_type,
            "risk_level": prediction.risk_level.value,
            "predicted_onset_date": prediction.predicted_onset_date.isoformat(),
            "days_until_onset": days_until,
        },
    )


def _task_priority(priority_score: float) -> InsightPriority:
    if priority_score >= 0.9:
        return InsightPriority.CRITICAL
    if priority_score >= 0.8:
        return InsightPriority.HIGH
    return InsightPriority.MEDIUM


def task_recommendation_to_insight(task: TaskRecommendation) -> Insight:
    """Map a smart task recommendation to an executable insight."""
    presentation = task_presentation(task.task_type)

    return build_insight(
        id=f"task_{task.id}",
        type=InsightType.TASK_RECOMMENDATION,
        priority=_task_priority(task.priority_score),
        title=presentation.title,
        subtitle=truncate_text(task.reasoning),
        description=task.reasoning or None,
        icon=presentation.icon,
        action_label="Check Weather & Execute" if task.weather_dependent else "Execute Now",
        action_type=ActionType.EXECUTE,
        action_data={"task_id": task.id, "task_type": task.task_type},
        confidence=task.confidence_score,
        time_relevant=True,
        expires_at=task.expires_at,
        tags=("task", "recommendation", task.task_type),
        data={
            "priority_score": task.priority_score,
            "weather_dependent": task.weather_dependent,
        },
    )


# --- Weather ---


def weather_advice_to_insight(advice: WeatherAdvice, farm_id: int, index: int) -> Insight:
    """Map one inference weather advisory to an insight."""
    return build_insight(
        id=f"ai_weather_{index}",
        type=InsightType.WEATHER_ADVISORY,
        priority=InsightPriority(advice.priority),
        title=advice.title,
        subtitle=truncate_text(advice.subtitle),
        action_label=advice.action_label,
        action_type=ActionType.NAVIGATE,
        action_data={"route": f"/farms/{farm_id}/weather"},
        confidence=advice.confidence,
        time_relevant=advice.time_relevant,
        tags=("weather", "advisory"),
    )


def fungal_risk_to_insight(
    weather: WeatherSnapshot,
    farm_id: int,
    confidence: float = BASIC_CONFIDENCE,
) -> Insight:
    """Humid, warm conditions favour fungal disease."""
    return build_insight(
        id="weather_fungal_risk",
        type=InsightType.WEATHER_ADVISORY,
        priority=InsightPriority.HIGH,
        title="High Fungal Disease Risk",
        subtitle=(
            f"{format_number(weather.humidity)}% humidity, "
            f"{format_number(weather.temperature)}°C"
        ),
        action_label="Check Prevention Plan",
        action_type=ActionType.NAVIGATE,
        action_data={"route": f"/farms/{farm_id}/pest-alerts"},
        confidence=confidence,
        time_relevant=True,
        tags=("weather", "disease", "prevention"),
        data={"humidity": weather.humidity, "temperature": weather.temperature},
    )


def spray_wind_to_insight(
    weather: WeatherSnapshot,
    farm_id: int,
    confidence: float = BASIC_CONFIDENCE,
) -> Insight:
    """Wind too strong for spraying."""
    return build_insight(
        id="weather_spray_warning",
        type=InsightType.WEATHER_ADVISORY,
        priority=InsightPriority.MEDIUM,
        title="High Wind - Avoid Spraying",
        subtitle=f"Wind speed: {format_number(weather.wind_speed)} km/h",
        icon="Wind",
        action_label="Check Forecast",
        action_type=ActionType.NAVIGATE,
        action_data={"route": f"/farms/{farm_id}/weather"},
        confidence=confidence,
        time_relevant=True,
        tags=("weather", "spray", "safety"),
        data={"wind_speed": weather.wind_speed},
    )


# --- Financial ---


def _trend_icon(trend: str) -> str:
    if trend == "increasing":
        return "TrendingUp"
    if trend == "decreasing":
        return "TrendingDown"
    return "DollarSign"


def financial_analysis_to_insights(analysis: FinancialAnalysis, farm_id: int) -> list[Insight]:
    """Map a spending analysis to a trend insight plus up to two risk insights."""
    confidence = normalize_confidence(analysis.confidence)
    route = f"/farms/{farm_id}/reports"

    insights = [
        build_insight(
            id="ai_financial_analysis",
            type=InsightType.FINANCIAL_INSIGHT,
            priority=(
                InsightPriority.HIGH
                if abs(analysis.variance_from_average) > 25
                else InsightPriority.MEDIUM
            ),
            title=financial_title(analysis.trend, analysis.variance_from_average),
            subtitle=truncate_text(analysis.recommendation),
            description=analysis.recommendation,
            icon=_trend_icon(analysis.trend),
            action_label="View Analysis",
            action_type=ActionType.NAVIGATE,
            action_data={"route": route},
            confidence=confidence,
            time_relevant=True,
            tags=("finance", analysis.trend, "analysis"),
            data=analysis.model_dump(mode="json"),
        )
    ]

    if confidence > RISK_FACTOR_MIN_CONFIDENCE:
        for index, risk in enumerate(analysis.risk_factors[:MAX_RISK_FACTORS]):
            insights.append(
                build_insight(
                    id=f"financial_risk_{index}",
                    type=InsightType.FINANCIAL_INSIGHT,
                    priority=InsightPriority.MEDIUM,
                    title="Financial Risk Detected",
                    subtitle=truncate_text(risk),
                    description=risk,
                    icon="AlertTriangle",
                    action_label="Review Risk",
                    action_type=ActionType.NAVIGATE,
                    action_data={"route": route},
                    confidence=confidence,
                    time_relevant=True,
                    tags=("finance", "risk"),
                )
            )

    return insights


def overspend_to_insight(
    recent_total: float,
    monthly_baseline: float,
    farm_id: int,
    confidence: float = BASIC_CONFIDENCE,
) -> Insight:
    """Recent spending above the farm's own historical monthly average."""
    return build_insight(
        id="financial_overspend_fallback",
        type=InsightType.FINANCIAL_INSIGHT,
        priority=InsightPriority.MEDIUM,
        title=f"Spending Above Average: ₹{recent_total:,.0f}",
        subtitle="Basic analysis - consider detailed review",
        action_label="View Breakdown",
        action_type=ActionType.NAVIGATE,
        action_data={"route": f"/farms/{farm_id}/reports"},
        confidence=confidence,
        time_relevant=True,
        tags=("finance", "expense"),
        data={
            "recent_total": round(recent_total, 2),
            "monthly_baseline": round(monthly_baseline, 2),
        },
    )


# --- Growth stage ---


def growth_analysis_to_insight(analysis: GrowthAnalysis, farm_id: int) -> Insight:
    """Map a growth stage assessment to an optimization insight."""
    key = stage_key(analysis.stage)

    return build_insight(
        id="ai_growth_stage",
        type=InsightType.GROWTH_OPTIMIZATION,
        priority=InsightPriority.HIGH if analysis.time_relevant else InsightPriority.MEDIUM,
        title=growth_stage_title(analysis.stage),
        subtitle=truncate_text(analysis.description),
        description=analysis.description,
        action_label="View Recommendations",
        action_type=ActionType.NAVIGATE,
        action_data={
            "route": f"/farms/{farm_id}/growth-guide",
            "recommendations": list(analysis.recommendations),
        },
        confidence=analysis.confidence,
        time_relevant=analysis.time_relevant,
        tags=("growth", key, "optimization"),
        data=analysis.model_dump(mode="json"),
    )


def flowering_window_to_insight(farm_id: int, confidence: float = BASIC_CONFIDENCE) -> Insight:
    """Seasonal flowering reminder used when no live growth signal exists."""
    return build_insight(
        id="growth_flowering_fallback",
        type=InsightType.GROWTH_OPTIMIZATION,
        priority=InsightPriority.HIGH,
        title="Critical Flowering Stage",
        subtitle="Traditional seasonal analysis - optimize pollination",
        action_label="View Care Plan",
        action_type=ActionType.NAVIGATE,
        action_data={"route": f"/farms/{farm_id}/growth-guide"},
        confidence=confidence,
        time_relevant=True,
        tags=("growth", "flowering"),
    )
