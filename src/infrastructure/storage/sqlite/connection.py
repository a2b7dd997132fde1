"""
Async SQLite connection pool with aiosqlite.

Farm records, pest predictions and task recommendations all live in one
SQLite database; every store borrows connections from the global pool.
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import DatabaseError

logger = get_logger(__name__)

# Applied to every pooled connection; busy_timeout is added per pool
CONNECTION_PRAGMAS: tuple[str, ...] = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed-size pool of aiosqlite connections (WAL, foreign keys, Row factory)."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._connections: list[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return bool(self._connections)

    async def initialize(self) -> None:
        """Open all pooled connections."""
        async with self._lock:
            if self._connections:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # First connection switches the file to WAL before the rest open
            first = await self._open()
            rest = await asyncio.gather(*(self._open() for _ in range(self.pool_size - 1)))

            self._connections = [first, *rest]
            for conn in self._connections:
                self._idle.put_nowait(conn)

            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection, returning it to the pool on exit.

        Waits when every connection is in use.
        """
        if not self._connections:
            await self.initialize()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; commit on success, roll back on exception."""
        async with self.acquire() as conn:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def ping(self) -> bool:
        """True when the database answers a trivial query."""
        async with self.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            row = await cursor.fetchone()
        return row is not None and row[0] == 1

    async def close(self) -> None:
        """Close every pooled connection."""
        async with self._lock:
            connections, self._connections = self._connections, []
            self._idle = asyncio.Queue()
            for conn in connections:
                await conn.close()
            logger.info("connection_pool_closed", closed=len(connections))


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        pool, _pool = _pool, None
        await pool.close()


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Borrow a connection from the global pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Borrow a connection from the global pool inside a transaction."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn


async def fetch_all(
    operation: str,
    query: str,
    params: Sequence[Any] = (),
) -> list[aiosqlite.Row]:
    """
    Run a read query on a pooled connection.

    Raises:
        DatabaseError: SQLite rejected the query
    """
    async with get_connection() as conn:
        try:
            cursor = await conn.execute(query, params)
            return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            raise DatabaseError(operation, str(e)) from e


async def fetch_one(
    operation: str,
    query: str,
    params: Sequence[Any] = (),
) -> aiosqlite.Row | None:
    """Single-row variant of fetch_all."""
    async with get_connection() as conn:
        try:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError(operation, str(e)) from e
