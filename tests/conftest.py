"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from datetime import date
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.api.main import app
from src.core.entities import (
    ActionType,
    FarmContext,
    Insight,
    InsightPriority,
    InsightType,
)


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_insight() -> Callable[..., Insight]:
    """Factory for insights with sensible defaults."""

    def _make(id: str = "insight_1", **overrides: Any) -> Insight:
        fields: dict[str, Any] = {
            "id": id,
            "type": InsightType.PEST_ALERT,
            "priority": InsightPriority.MEDIUM,
            "title": "Downy Mildew Risk",
            "subtitle": "Prevention window: 5 days",
            "action_label": "View Prevention",
            "action_type": ActionType.NAVIGATE,
            "confidence": 0.7,
        }
        fields.update(overrides)
        return Insight(**fields)

    return _make


@pytest.fixture
def sample_farm() -> FarmContext:
    """A grape farm with coordinates."""
    return FarmContext(
        id=42,
        name="Sunrise Vineyard",
        region="Nashik, Maharashtra",
        crop="grapes",
        crop_variety="Thompson Seedless",
        planting_date=date(2019, 12, 1),
        latitude=19.99,
        longitude=73.79,
        area=4.5,
    )
