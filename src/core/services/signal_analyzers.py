"""
Signal analyzers for weather, financial and growth insights.

Each signal has an inference-backed analyzer (prompts the LLM for a JSON
answer and validates it) and a rule-based analyzer (fixed thresholds, no
I/O). The SignalAdapter decides which one's output is used.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config import get_logger
from src.core.entities.farm import ActivityRecord, ExpenseRecord, FarmContext
from src.core.entities.insight import Insight
from src.core.entities.signals import (
    FinancialAnalysis,
    GrowthAnalysis,
    WeatherAdvice,
    WeatherSnapshot,
)
from src.core.exceptions import LLMResponseError, MalformedPayloadError
from src.core.interfaces.llm import ILLMProvider
from src.core.services.insight_normalizer import (
    financial_analysis_to_insights,
    flowering_window_to_insight,
    fungal_risk_to_insight,
    growth_analysis_to_insight,
    normalize_confidence,
    overspend_to_insight,
    spray_wind_to_insight,
    weather_advice_to_insight,
)
from src.core.services.signal_adapter import AnalysisResult, BasicAnalyzer, EnhancedAnalyzer

logger = get_logger(__name__)

MAX_WEATHER_ADVISORIES = 3

# Basic weather rules
FUNGAL_HUMIDITY_THRESHOLD = 80.0  # %
FUNGAL_TEMPERATURE_THRESHOLD = 20.0  # °C
SPRAY_WIND_THRESHOLD = 15.0  # km/h

# Basic financial rule: recent spend above this multiple of the baseline
OVERSPEND_RATIO = 1.2

# Flowering window for grapes in India (March-May)
FLOWERING_MONTHS = frozenset({3, 4, 5})


# --- Analyzer inputs ---


@dataclass
class WeatherInputs:
    """Current conditions plus recent field activities."""

    weather: WeatherSnapshot
    activities: list[ActivityRecord] = field(default_factory=list)


@dataclass
class FinancialInputs:
    """Expenses in the recent window and in the prior (history) window."""

    recent: list[ExpenseRecord]
    history: list[ExpenseRecord]
    recent_window_days: int = 30
    history_window_days: int = 180

    @property
    def recent_total(self) -> float:
        return sum(expense.cost for expense in self.recent)

    @property
    def history_total(self) -> float:
        return sum(expense.cost for expense in self.history)

    @property
    def baseline(self) -> float:
        """Prior-window spending scaled to the length of the recent window."""
        prior_days = self.history_window_days - self.recent_window_days
        if prior_days <= 0:
            return 0.0
        return self.history_total * self.recent_window_days / prior_days


@dataclass
class GrowthInputs:
    """Context for growth stage analysis."""

    today: date
    weather: WeatherSnapshot | None = None
    activities: list[ActivityRecord] = field(default_factory=list)


# --- Inference helpers ---


def extract_json_string(text: str) -> str | None:
    """Extract a JSON object or array from LLM response text."""
    text = text.strip()

    # Try direct parse first
    if text.startswith(("{", "[")):
        return text

    # Try to extract from code block
    match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if match:
        return match.group(1).strip()

    # Try to find an embedded array or object
    match = re.search(r"\[[\s\S]*\]|\{[\s\S]*\}", text)
    if match:
        return match.group(0)

    return None


def _activity_context(activities: list[ActivityRecord], limit: int = 5) -> list[dict[str, Any]]:
    return [
        {
            "type": activity.activity_type.value,
            "date": activity.date.isoformat(),
            "notes": activity.notes,
        }
        for activity in activities[:limit]
    ]


def _weather_context(weather: WeatherSnapshot | None) -> dict[str, Any]:
    if weather is None:
        return {}
    return weather.model_dump(mode="json", exclude={"observed_at"})


class InferenceAnalyzer:
    """Shared plumbing for analyzers that ask the LLM for a JSON answer."""

    signal = "inference"
    system_prompt = ""

    def __init__(
        self,
        llm: ILLMProvider,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def _ask(self, prompt: str) -> Any:
        """
        Send the prompt and return the decoded JSON answer.

        Raises:
            LLMError: Inference call failed
            MalformedPayloadError: Answer was not JSON
        """
        response = await self._llm.chat(
            [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if response.error:
            raise LLMResponseError(response.error, response.text)

        json_str = extract_json_string(response.text)
        if not json_str:
            raise MalformedPayloadError(self.signal, "no JSON found in response", response.text)

        try:
            return json.loads(json_str)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(self.signal, f"invalid JSON: {e}", json_str) from e


# --- Weather ---

WEATHER_SYSTEM_PROMPT = "You are an agricultural AI expert specializing in grape farming in India."

WEATHER_PROMPT = """Analyze weather data and generate 2-3 actionable insights for immediate farmer action:
{context}

Focus on:
1. Immediate risks or opportunities from current weather
2. Optimal timing for activities based on conditions
3. Prevention measures needed for upcoming weather

Return ONLY valid JSON array:
[{{
  "type": "weather_advisory",
  "priority": "critical|high|medium|low",
  "title": "concise title",
  "subtitle": "specific conditions and metrics",
  "confidence": number (0.0-1.0),
  "timeRelevant": boolean,
  "actionLabel": "specific action button text"
}}]"""


class EnhancedWeatherAnalyzer(InferenceAnalyzer, EnhancedAnalyzer[WeatherInputs]):
    """LLM weather advisories; result confidence is the best item's confidence."""

    signal = "weather"
    system_prompt = WEATHER_SYSTEM_PROMPT

    async def analyze(self, farm: FarmContext, inputs: WeatherInputs) -> AnalysisResult:
        context = {
            "currentWeather": _weather_context(inputs.weather),
            "farmLocation": farm.region,
            "recentActivities": _activity_context(inputs.activities),
        }
        payload = await self._ask(WEATHER_PROMPT.format(context=json.dumps(context)))

        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise MalformedPayloadError(self.signal, "expected a JSON array", str(payload))

        insights: list[Insight] = []
        for item in payload[:MAX_WEATHER_ADVISORIES]:
            try:
                advice = WeatherAdvice.model_validate(item)
            except PydanticValidationError:
                logger.debug("weather_advice_skipped", item=str(item)[:200])
                continue
            insights.append(weather_advice_to_insight(advice, farm.id, len(insights)))

        if not insights:
            raise MalformedPayloadError(self.signal, "no usable advisories", str(payload))

        return AnalysisResult(
            insights=insights,
            confidence=max(insight.confidence for insight in insights),
        )


class BasicWeatherAnalyzer(BasicAnalyzer[WeatherInputs]):
    """Fungal disease and spray-drift rules on current conditions."""

    def analyze(self, farm: FarmContext, inputs: WeatherInputs) -> list[Insight]:
        weather = inputs.weather
        insights: list[Insight] = []

        if (
            weather.humidity > FUNGAL_HUMIDITY_THRESHOLD
            and weather.temperature > FUNGAL_TEMPERATURE_THRESHOLD
        ):
            insights.append(fungal_risk_to_insight(weather, farm.id))

        if weather.wind_speed > SPRAY_WIND_THRESHOLD:
            insights.append(spray_wind_to_insight(weather, farm.id))

        return insights


# --- Financial ---

FINANCIAL_SYSTEM_PROMPT = (
    "You are a financial analyst specializing in agricultural expenses for grape farming."
)

FINANCIAL_PROMPT = """Analyze the spending pattern and provide insights:
{context}

Compare current spending with historical patterns and identify:
1. Spending trends and variations
2. Unusual expenses or cost spikes
3. Optimization opportunities
4. Risk factors for budget overruns

Return ONLY valid JSON:
{{
  "trend": "increasing|decreasing|stable",
  "varianceFromAverage": number (percentage, can be negative),
  "recommendation": "specific actionable advice",
  "confidence": number (0.0-1.0),
  "nextReviewDate": "YYYY-MM-DD",
  "riskFactors": ["list of identified risks"]
}}"""


def _expense_context(expenses: list[ExpenseRecord], limit: int) -> list[dict[str, Any]]:
    return [
        {
            "date": expense.date.isoformat(),
            "type": expense.type,
            "description": expense.description,
            "cost": expense.cost,
        }
        for expense in expenses[:limit]
    ]


class EnhancedFinancialAnalyzer(InferenceAnalyzer, EnhancedAnalyzer[FinancialInputs]):
    """LLM spending trend analysis."""

    signal = "financial"
    system_prompt = FINANCIAL_SYSTEM_PROMPT

    async def analyze(self, farm: FarmContext, inputs: FinancialInputs) -> AnalysisResult:
        context = {
            "recentExpenses": _expense_context(inputs.recent, 10),
            "totalCurrentSpend": round(inputs.recent_total, 2),
            "historicalData": _expense_context(inputs.history, 20),
        }
        payload = await self._ask(FINANCIAL_PROMPT.format(context=json.dumps(context)))

        try:
            analysis = FinancialAnalysis.model_validate(payload)
        except PydanticValidationError as e:
            raise MalformedPayloadError(self.signal, str(e), str(payload)) from e

        return AnalysisResult(
            insights=financial_analysis_to_insights(analysis, farm.id),
            confidence=normalize_confidence(analysis.confidence),
        )


class BasicFinancialAnalyzer(BasicAnalyzer[FinancialInputs]):
    """Flags recent spending well above the farm's own prior average."""

    def analyze(self, farm: FarmContext, inputs: FinancialInputs) -> list[Insight]:
        baseline = inputs.baseline
        if baseline <= 0:
            return []

        recent_total = inputs.recent_total
        if recent_total <= baseline * OVERSPEND_RATIO:
            return []

        return [overspend_to_insight(recent_total, baseline, farm.id)]


# --- Growth stage ---

GROWTH_SYSTEM_PROMPT = "You are an expert viticulturist analyzing grape growth stages in India."

GROWTH_PROMPT = """Analyze grape growth stage based on:
- Location: {region}
- Planting Date: {planting_date}
- Recent Activities: {activities}
- Weather Patterns: {weather}
- Current Date: {today}

Consider Indian grape growing seasons:
- Bud Break: December-January
- Leaf Development: February-March
- Flowering: March-April
- Fruit Set: April-May
- Veraison: June-July
- Harvest: July-September

Return ONLY valid JSON:
{{
  "stage": "string (bud_break|leaf_development|flowering|fruit_set|veraison|harvest|dormancy)",
  "confidence": number (0.0-1.0),
  "recommendations": ["specific actionable advice"],
  "timeRelevant": boolean,
  "nextStageDate": "YYYY-MM-DD",
  "description": "brief explanation"
}}"""


class EnhancedGrowthAnalyzer(InferenceAnalyzer, EnhancedAnalyzer[GrowthInputs]):
    """LLM growth stage assessment."""

    signal = "growth"
    system_prompt = GROWTH_SYSTEM_PROMPT

    async def analyze(self, farm: FarmContext, inputs: GrowthInputs) -> AnalysisResult:
        prompt = GROWTH_PROMPT.format(
            region=farm.region or "Unknown",
            planting_date=farm.planting_date.isoformat() if farm.planting_date else "Unknown",
            activities=json.dumps(_activity_context(inputs.activities)),
            weather=json.dumps(_weather_context(inputs.weather)),
            today=inputs.today.isoformat(),
        )
        payload = await self._ask(prompt)

        try:
            analysis = GrowthAnalysis.model_validate(payload)
        except PydanticValidationError as e:
            raise MalformedPayloadError(self.signal, str(e), str(payload)) from e

        return AnalysisResult(
            insights=[growth_analysis_to_insight(analysis, farm.id)],
            confidence=normalize_confidence(analysis.confidence),
        )


class BasicGrowthAnalyzer(BasicAnalyzer[GrowthInputs]):
    """Seasonal calendar rule: flowering care during March-May."""

    def analyze(self, farm: FarmContext, inputs: GrowthInputs) -> list[Insight]:
        if inputs.today.month not in FLOWERING_MONTHS:
            return []
        return [flowering_window_to_insight(farm.id)]
