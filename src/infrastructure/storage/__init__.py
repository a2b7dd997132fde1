"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteFarmStore,
    SQLitePestPredictionStore,
    SQLiteTaskRecommendationStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteFarmStore",
    "SQLitePestPredictionStore",
    "SQLiteTaskRecommendationStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
