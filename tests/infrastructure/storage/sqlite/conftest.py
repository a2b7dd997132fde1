"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import aiosqlite
import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.infrastructure.storage.sqlite.connection import close_pool
from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await initialize_database(temp_db_path)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def store_db(initialized_db: Path) -> AsyncGenerator[Path, None]:
    """Point the global connection pool at the migrated temp database."""
    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = initialized_db
    mock_settings.storage.pool_size = 2
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield initialized_db
        finally:
            await close_pool()


@pytest.fixture
def execute_sql(initialized_db: Path) -> Callable[..., Awaitable[int]]:
    """Run one write statement against the temp database; returns lastrowid."""

    async def _execute(sql: str, params: tuple[Any, ...] = ()) -> int:
        async with aiosqlite.connect(initialized_db) as conn:
            cursor = await conn.execute(sql, params)
            await conn.commit()
            return cursor.lastrowid

    return _execute


@pytest.fixture
async def farm_id(execute_sql) -> int:
    """A seeded farm."""
    return await execute_sql(
        """
        INSERT INTO farms (name, region, crop_variety, planting_date, latitude, longitude, area)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        ("Sunrise Vineyard", "Nashik, Maharashtra", "Thompson Seedless", "2019-12-01",
         19.99, 73.79, 4.5),
    )
