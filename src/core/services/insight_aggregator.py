"""
Insight Aggregator.

Resolves the farm, fans out the five signal pipelines concurrently, and
merges their output into one ranked list. Any pipeline may fail without
affecting the others; a failed pipeline simply contributes no insights.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import TypeVar

from src.config import bound_log_context, get_logger
from src.config.settings import InsightSettings
from src.core.entities.farm import ActivityRecord, FarmContext
from src.core.entities.insight import Insight, InsightType
from src.core.entities.signals import RiskLevel, WeatherSnapshot
from src.core.exceptions import ProviderTimeoutError
from src.core.interfaces.llm import ILLMProvider
from src.core.interfaces.providers import (
    IPestPredictionProvider,
    ITaskRecommendationProvider,
    IWeatherProvider,
)
from src.core.interfaces.storage import IFarmStore
from src.core.services.insight_normalizer import (
    pest_prediction_to_insight,
    task_recommendation_to_insight,
)
from src.core.services.insight_ranking import rank_and_truncate, rank_insights
from src.core.services.signal_adapter import (
    SignalAdapter,
    SignalOutcome,
    describe_error,
)
from src.core.services.signal_analyzers import (
    BasicFinancialAnalyzer,
    BasicGrowthAnalyzer,
    BasicWeatherAnalyzer,
    EnhancedFinancialAnalyzer,
    EnhancedGrowthAnalyzer,
    EnhancedWeatherAnalyzer,
    FinancialInputs,
    GrowthInputs,
    WeatherInputs,
)

logger = get_logger(__name__)

T = TypeVar("T")

ALERT_RISK_LEVELS = frozenset({RiskLevel.CRITICAL, RiskLevel.HIGH})

# Recent activity context for inference prompts
ACTIVITIES_PER_KIND = 5
ACTIVITIES_LIMIT = 10

# Loaders run their bounded provider calls concurrently; the loader bound
# only catches work outside those calls
LOADER_TIMEOUT_FACTOR = 2


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class AggregationReport:
    """Unranked per-signal outcomes for one farm."""

    farm: FarmContext | None
    outcomes: list[SignalOutcome] = field(default_factory=list)

    @property
    def insights(self) -> list[Insight]:
        """All insights, concatenated in provider call order."""
        return [insight for outcome in self.outcomes for insight in outcome.insights]

    def outcome(self, source: str) -> SignalOutcome | None:
        return next((o for o in self.outcomes if o.source == source), None)


class InsightAggregator:
    """
    Builds the ranked insight feed for a farm.

    Depends only on core interfaces. Without an LLM provider every
    adapter-backed signal uses its rule-based tier.
    """

    def __init__(
        self,
        farm_store: IFarmStore,
        pest_provider: IPestPredictionProvider,
        task_provider: ITaskRecommendationProvider,
        weather_provider: IWeatherProvider,
        llm: ILLMProvider | None = None,
        settings: InsightSettings | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._farms = farm_store
        self._pests = pest_provider
        self._tasks = task_provider
        self._weather = weather_provider
        self._settings = settings or InsightSettings()
        self._clock = clock

        s = self._settings
        adapter_options = {
            "timeout": s.provider_timeout,
            "fallback_confidence": s.fallback_confidence,
            "load_timeout": s.provider_timeout * LOADER_TIMEOUT_FACTOR,
        }
        self._weather_adapter = SignalAdapter(
            "weather",
            loader=self._load_weather_inputs,
            basic=BasicWeatherAnalyzer(),
            enhanced=EnhancedWeatherAnalyzer(llm) if llm else None,
            min_confidence=s.weather_min_confidence,
            **adapter_options,
        )
        self._financial_adapter = SignalAdapter(
            "financial",
            loader=self._load_financial_inputs,
            basic=BasicFinancialAnalyzer(),
            enhanced=EnhancedFinancialAnalyzer(llm) if llm else None,
            min_confidence=s.financial_min_confidence,
            **adapter_options,
        )
        self._growth_adapter = SignalAdapter(
            "growth",
            loader=self._load_growth_inputs,
            basic=BasicGrowthAnalyzer(),
            enhanced=EnhancedGrowthAnalyzer(llm) if llm else None,
            min_confidence=s.growth_min_confidence,
            **adapter_options,
        )

    # --- Public API ---

    async def aggregate(self, farm_id: int, limit: int | None = None) -> list[Insight]:
        """
        Ranked insights for a farm, truncated to `limit`.

        Returns an empty list when the farm does not exist.
        """
        if limit is None:
            limit = self._settings.default_limit

        report = await self.collect(farm_id)
        ranked = rank_and_truncate(self._live(report.insights), limit)

        logger.info(
            "insight_aggregation_complete",
            farm_id=farm_id,
            total=len(report.insights),
            returned=len(ranked),
            outcomes={o.source: o.kind.value for o in report.outcomes},
        )
        return ranked

    async def aggregate_by_category(self, farm_id: int) -> dict[InsightType, list[Insight]]:
        """Insights grouped by type, each group ranked. Every type is present."""
        report = await self.collect(farm_id)
        insights = rank_and_truncate(self._live(report.insights), self._settings.category_limit)

        grouped: dict[InsightType, list[Insight]] = {t: [] for t in InsightType}
        for insight in insights:
            grouped[insight.type].append(insight)
        return {t: rank_insights(group) for t, group in grouped.items()}

    async def collect(self, farm_id: int) -> AggregationReport:
        """Run every signal pipeline for a farm and return the raw outcomes."""
        with bound_log_context(farm_id=farm_id):
            farm = await self._resolve_farm(farm_id)
            if farm is None:
                logger.info("insight_farm_not_found", farm_id=farm_id)
                return AggregationReport(farm=None)

            outcomes = await asyncio.gather(
                self._pest_outcome(farm),
                self._task_outcome(farm),
                self._weather_adapter.run(farm),
                self._financial_adapter.run(farm),
                self._growth_adapter.run(farm),
            )
            return AggregationReport(farm=farm, outcomes=list(outcomes))

    async def _resolve_farm(self, farm_id: int) -> FarmContext | None:
        try:
            return await self._bounded(self._farms.get_farm(farm_id))
        except TimeoutError:
            raise ProviderTimeoutError("farm_store", self._settings.provider_timeout) from None

    # --- Direct signals ---

    async def _pest_outcome(self, farm: FarmContext) -> SignalOutcome:
        try:
            predictions = await self._bounded(self._pests.get_active_predictions(farm.id))
        except Exception as e:
            logger.warning("insight_pest_error", farm_id=farm.id, exc_info=True)
            return SignalOutcome.empty("pest", error=describe_error(e))

        today = self._clock().date()
        insights = [
            pest_prediction_to_insight(prediction, farm.id, today)
            for prediction in predictions
            if prediction.risk_level in ALERT_RISK_LEVELS
        ]
        return SignalOutcome.direct("pest", insights)

    async def _task_outcome(self, farm: FarmContext) -> SignalOutcome:
        try:
            tasks = await self._bounded(self._tasks.get_active_recommendations(farm.id))
        except Exception as e:
            logger.warning("insight_task_error", farm_id=farm.id, exc_info=True)
            return SignalOutcome.empty("tasks", error=describe_error(e))

        s = self._settings
        eligible = [task for task in tasks if task.priority_score >= s.task_min_priority_score]
        insights = [task_recommendation_to_insight(task) for task in eligible[: s.max_task_insights]]
        return SignalOutcome.direct("tasks", insights)

    # --- Adapter loaders ---

    async def _load_weather_inputs(self, farm: FarmContext) -> WeatherInputs:
        weather, activities = await asyncio.gather(
            self._bounded(
                self._weather.get_current_weather(farm.region, farm.latitude, farm.longitude)
            ),
            self._recent_activities(farm),
        )
        return WeatherInputs(weather=weather, activities=activities)

    async def _load_financial_inputs(self, farm: FarmContext) -> FinancialInputs | None:
        s = self._settings
        today = self._clock().date()
        recent_start = today - timedelta(days=s.recent_window_days)
        history_start = today - timedelta(days=s.history_window_days)

        recent, history = await asyncio.gather(
            self._bounded(self._farms.list_expenses(farm.id, start=recent_start)),
            self._bounded(
                self._farms.list_expenses(farm.id, start=history_start, end=recent_start)
            ),
        )
        if not recent or not history:
            return None

        return FinancialInputs(
            recent=recent,
            history=history,
            recent_window_days=s.recent_window_days,
            history_window_days=s.history_window_days,
        )

    async def _load_growth_inputs(self, farm: FarmContext) -> GrowthInputs:
        weather, activities = await asyncio.gather(
            self._optional_weather(farm),
            self._recent_activities(farm),
        )
        return GrowthInputs(today=self._clock().date(), weather=weather, activities=activities)

    # --- Helpers ---

    async def _optional_weather(self, farm: FarmContext) -> WeatherSnapshot | None:
        """Current weather, or None when the provider fails or stalls."""
        try:
            return await self._bounded(
                self._weather.get_current_weather(farm.region, farm.latitude, farm.longitude)
            )
        except Exception as e:
            logger.debug("growth_weather_unavailable", farm_id=farm.id, error=describe_error(e))
            return None

    async def _recent_activities(self, farm: FarmContext) -> list[ActivityRecord]:
        since: date = self._clock().date() - timedelta(days=self._settings.recent_window_days)
        return await self._bounded(
            self._farms.list_recent_activities(
                farm.id, since=since, per_kind=ACTIVITIES_PER_KIND, limit=ACTIVITIES_LIMIT
            )
        )

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self._settings.provider_timeout)

    def _live(self, insights: list[Insight]) -> list[Insight]:
        if not self._settings.drop_expired:
            return insights
        now = self._clock()
        return [insight for insight in insights if not insight.is_expired(now)]

