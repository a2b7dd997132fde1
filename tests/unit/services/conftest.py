"""Shared fakes for insight service tests.

Services depend only on core interfaces, so these tests never touch the
database, the weather API or the LLM.
"""

from collections.abc import Callable
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.config.settings import InsightSettings
from src.core.entities.farm import FarmContext
from src.core.entities.signals import WeatherSnapshot
from src.core.interfaces import ILLMProvider, LLMResponse
from src.core.interfaces.providers import (
    IPestPredictionProvider,
    ITaskRecommendationProvider,
    IWeatherProvider,
)
from src.core.interfaces.storage import IFarmStore


@pytest.fixture
def farm() -> FarmContext:
    return FarmContext(
        id=42,
        name="Sunrise Vineyard",
        region="Nashik",
        planting_date=date(2019, 12, 1),
        latitude=19.99,
        longitude=73.79,
    )


@pytest.fixture
def farm_store(farm: FarmContext) -> AsyncMock:
    store = AsyncMock(spec=IFarmStore)
    store.get_farm.return_value = farm
    store.list_expenses.return_value = []
    store.list_recent_activities.return_value = []
    return store


@pytest.fixture
def pest_provider() -> AsyncMock:
    provider = AsyncMock(spec=IPestPredictionProvider)
    provider.get_active_predictions.return_value = []
    return provider


@pytest.fixture
def task_provider() -> AsyncMock:
    provider = AsyncMock(spec=ITaskRecommendationProvider)
    provider.get_active_recommendations.return_value = []
    return provider


@pytest.fixture
def weather_provider() -> AsyncMock:
    provider = AsyncMock(spec=IWeatherProvider)
    # Mild, calm weather: no rule-based weather advisories
    provider.get_current_weather.return_value = WeatherSnapshot(
        temperature=24.0, humidity=55.0, wind_speed=6.0
    )
    return provider


@pytest.fixture
def insight_settings() -> InsightSettings:
    return InsightSettings(provider_timeout=1.0)


@pytest.fixture
def make_llm() -> Callable[[str], AsyncMock]:
    """Factory for LLM mocks whose chat() answers with the given text."""

    def _make(text: str) -> AsyncMock:
        llm = AsyncMock(spec=ILLMProvider)
        llm.chat.return_value = LLMResponse(text=text, model="test-model")
        return llm

    return _make
