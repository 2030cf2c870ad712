"""
SQLite access for the catalog and sales stores.

Every connection, pooled or one-off, comes from ``open_connection`` with the
same pragmas. Connections run in autocommit mode; writes go through
``transaction()``, which takes the write lock up front with
``BEGIN IMMEDIATE`` so a sale header and its lines never stall on a lock
upgrade halfway through.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from shopdesk.config import get_logger, get_settings

logger = get_logger(__name__)

PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


async def open_connection(db_path: Path, busy_timeout: int = 30000) -> aiosqlite.Connection:
    """Open an autocommit connection with WAL and foreign keys enabled."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path, isolation_level=None)
    for pragma in PRAGMAS:
        await conn.execute(pragma)
    await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout)}")
    conn.row_factory = aiosqlite.Row
    return conn


@dataclass(frozen=True)
class PoolStatus:
    """Snapshot reported by the database health check."""

    db_path: str
    size: int
    opened: int
    in_use: int
    schema_version: str | None
    latency_ms: float


class ConnectionPool:
    """
    Up to ``size`` connections, opened on demand and reused.

    A connection serves one task at a time. Waiting tasks block until one is
    handed back.
    """

    def __init__(self, db_path: Path, size: int = 5, busy_timeout: int = 30000):
        self.db_path = Path(db_path)
        self.size = size
        self.busy_timeout = busy_timeout

        self._slots = asyncio.Semaphore(size)
        self._idle: list[aiosqlite.Connection] = []
        self._opened: list[aiosqlite.Connection] = []

    @property
    def opened(self) -> int:
        return len(self._opened)

    @property
    def in_use(self) -> int:
        return len(self._opened) - len(self._idle)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for reads or single statements."""
        async with self._slots:
            if self._idle:
                conn = self._idle.pop()
            else:
                conn = await open_connection(self.db_path, self.busy_timeout)
                self._opened.append(conn)
                logger.debug("sqlite_connection_opened", opened=len(self._opened))
            try:
                yield conn
            finally:
                self._idle.append(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection holding the write lock; commits unless the block raises."""
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def status(self) -> PoolStatus:
        """Round-trip the database and report the applied schema version."""
        start = time.perf_counter()
        async with self.acquire() as conn:
            cursor = await conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
            )
            version = None
            if await cursor.fetchone() is not None:
                cursor = await conn.execute("SELECT MAX(version) FROM schema_migrations")
                version = (await cursor.fetchone())[0]
        return PoolStatus(
            db_path=str(self.db_path),
            size=self.size,
            opened=self.opened,
            in_use=self.in_use,
            schema_version=version,
            latency_ms=(time.perf_counter() - start) * 1000,
        )

    async def close(self) -> None:
        """Close every opened connection; the pool reopens lazily if used again."""
        opened, self._opened, self._idle = self._opened, [], []
        for conn in opened:
            await conn.close()
        if opened:
            logger.info("connection_pool_closed", db_path=str(self.db_path), closed=len(opened))


# Global connection pool
_pool: ConnectionPool | None = None


def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Borrow a connection from the global pool."""
    async with get_pool().acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Borrow a write transaction from the global pool."""
    async with get_pool().transaction() as conn:
        yield conn
