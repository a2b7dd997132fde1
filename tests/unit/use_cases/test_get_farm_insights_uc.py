"""Tests for GetFarmInsightsUseCase."""

from unittest.mock import AsyncMock

import pytest

from src.application.use_cases.get_farm_insights import GetFarmInsightsUseCase
from src.core.entities.insight import InsightType
from src.core.exceptions import DatabaseError
from src.core.services.insight_aggregator import InsightAggregator


@pytest.fixture
def aggregator() -> AsyncMock:
    return AsyncMock(spec=InsightAggregator)


class TestGetFarmInsightsUseCase:
    """Tests for the insight feed use case."""

    @pytest.mark.asyncio
    async def test_returns_aggregated_insights(self, aggregator, make_insight):
        insights = [make_insight("a"), make_insight("b")]
        aggregator.aggregate.return_value = insights

        result = await GetFarmInsightsUseCase(aggregator).get_insights_for_farm(42, limit=5)

        assert result == insights
        aggregator.aggregate.assert_awaited_once_with(42, 5)

    @pytest.mark.asyncio
    async def test_user_id_does_not_filter(self, aggregator, make_insight):
        aggregator.aggregate.return_value = [make_insight()]

        result = await GetFarmInsightsUseCase(aggregator).get_insights_for_farm(
            42, user_id="farmer-7"
        )

        assert len(result) == 1
        aggregator.aggregate.assert_awaited_once_with(42, 10)

    @pytest.mark.asyncio
    async def test_failure_degrades_to_empty(self, aggregator):
        aggregator.aggregate.side_effect = DatabaseError("get_farm", "database is locked")

        result = await GetFarmInsightsUseCase(aggregator).get_insights_for_farm(42)

        assert result == []

    @pytest.mark.asyncio
    async def test_by_category(self, aggregator, make_insight):
        grouped = {t: [] for t in InsightType}
        grouped[InsightType.PEST_ALERT] = [make_insight()]
        aggregator.aggregate_by_category.return_value = grouped

        result = await GetFarmInsightsUseCase(aggregator).get_insights_by_category(42)

        assert result is grouped

    @pytest.mark.asyncio
    async def test_by_category_failure_has_every_type(self, aggregator):
        aggregator.aggregate_by_category.side_effect = RuntimeError("boom")

        result = await GetFarmInsightsUseCase(aggregator).get_insights_by_category(42)

        assert set(result) == set(InsightType)
        assert all(group == [] for group in result.values())
