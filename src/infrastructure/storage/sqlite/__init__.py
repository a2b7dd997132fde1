"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.farm_store import SQLiteFarmStore
from src.infrastructure.storage.sqlite.pest_prediction_store import SQLitePestPredictionStore
from src.infrastructure.storage.sqlite.task_recommendation_store import (
    SQLiteTaskRecommendationStore,
)

# Singleton instances
_farm_store: SQLiteFarmStore | None = None
_pest_prediction_store: SQLitePestPredictionStore | None = None
_task_recommendation_store: SQLiteTaskRecommendationStore | None = None


async def get_farm_store() -> SQLiteFarmStore:
    """Get singleton farm store instance."""
    global _farm_store
    if _farm_store is None:
        _farm_store = SQLiteFarmStore()
    return _farm_store


async def get_pest_prediction_store() -> SQLitePestPredictionStore:
    """Get singleton pest prediction store instance."""
    global _pest_prediction_store
    if _pest_prediction_store is None:
        _pest_prediction_store = SQLitePestPredictionStore()
    return _pest_prediction_store


async def get_task_recommendation_store() -> SQLiteTaskRecommendationStore:
    """Get singleton task recommendation store instance."""
    global _task_recommendation_store
    if _task_recommendation_store is None:
        _task_recommendation_store = SQLiteTaskRecommendationStore()
    return _task_recommendation_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteFarmStore",
    "SQLitePestPredictionStore",
    "SQLiteTaskRecommendationStore",
    # Factory functions
    "get_farm_store",
    "get_pest_prediction_store",
    "get_task_recommendation_store",
]
