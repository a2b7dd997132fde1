"""
Get Farm Insights Use Case.

Entry point for the ranked insight feed and its grouped view. Failures
anywhere in the pipeline degrade to an empty result.
"""

from src.config import get_logger
from src.core.entities.insight import Insight, InsightType
from src.core.services.insight_aggregator import InsightAggregator

logger = get_logger(__name__)


class GetFarmInsightsUseCase:
    """Use case for reading a farm's insights."""

    def __init__(self, aggregator: InsightAggregator | None = None) -> None:
        self._aggregator = aggregator

    async def _get_aggregator(self) -> InsightAggregator:
        if self._aggregator is None:
            from src.application.services import get_insight_aggregator

            self._aggregator = await get_insight_aggregator()
        return self._aggregator

    async def get_insights_for_farm(
        self,
        farm_id: int,
        user_id: str | None = None,
        limit: int = 10,
    ) -> list[Insight]:
        """
        Ranked insights for a farm.

        Args:
            farm_id: Farm to analyze
            user_id: Requesting user, recorded in logs only
            limit: Maximum number of insights

        Returns:
            Up to `limit` insights, highest ranked first; empty on any failure
        """
        try:
            aggregator = await self._get_aggregator()
            insights = await aggregator.aggregate(farm_id, limit)
        except Exception:
            logger.error("farm_insights_failed", farm_id=farm_id, user_id=user_id, exc_info=True)
            return []

        logger.info(
            "farm_insights_served",
            farm_id=farm_id,
            user_id=user_id,
            count=len(insights),
        )
        return insights

    async def get_insights_by_category(
        self,
        farm_id: int,
        user_id: str | None = None,
    ) -> dict[InsightType, list[Insight]]:
        """Insights grouped by type; every type is present, possibly empty."""
        try:
            aggregator = await self._get_aggregator()
            return await aggregator.aggregate_by_category(farm_id)
        except Exception:
            logger.error(
                "farm_insight_categories_failed",
                farm_id=farm_id,
                user_id=user_id,
                exc_info=True,
            )
            return {insight_type: [] for insight_type in InsightType}
