"""
Versioned schema migrations.

Each migration is applied once, in version order, inside its own
``BEGIN IMMEDIATE`` transaction, and recorded with a checksum in
``schema_migrations``. The connection comes from ``open_connection`` so
migrations run with the same pragmas as the stores.
"""

import hashlib
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from shopdesk.config import get_logger, get_settings
from shopdesk.infrastructure.storage.sqlite.connection import open_connection

logger = get_logger(__name__)


@dataclass(frozen=True)
class Migration:
    """A named batch of DDL statements."""

    version: str
    name: str
    statements: tuple[str, ...]

    @property
    def checksum(self) -> str:
        content = "\n".join(self.statements)
        return hashlib.sha256(content.encode()).hexdigest()[:16]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version="001",
        name="catalog_and_sales",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS products (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                price TEXT NOT NULL,
                has_warranty INTEGER,
                warranty_months INTEGER,
                created_at TEXT NOT NULL
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_products_created ON products(created_at)",
            """
            CREATE TABLE IF NOT EXISTS sales (
                id TEXT PRIMARY KEY,
                username TEXT NOT NULL,
                phone_number TEXT NOT NULL,
                payment_method TEXT NOT NULL,
                discount TEXT NOT NULL DEFAULT '0',
                timestamp TEXT NOT NULL,
                invoice_url TEXT,
                invoice_status TEXT NOT NULL DEFAULT 'pending',
                notification_status TEXT NOT NULL DEFAULT 'pending',
                last_error TEXT
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_sales_timestamp ON sales(timestamp)",
            """
            CREATE TABLE IF NOT EXISTS sale_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                sale_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                product_id TEXT NOT NULL,
                product_name TEXT NOT NULL,
                price TEXT NOT NULL,
                discount_price TEXT,
                has_warranty INTEGER,
                warranty_months INTEGER,
                FOREIGN KEY (sale_id) REFERENCES sales(id) ON DELETE CASCADE
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_sale_items_sale ON sale_items(sale_id)",
        ),
    ),
)


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of applied migration versions to checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}
    except aiosqlite.OperationalError:
        # Table doesn't exist yet
        return {}


async def run_migrations(db_path: Path | None = None) -> list[str]:
    """
    Apply pending migrations.

    Returns:
        Versions applied by this call.
    """
    storage = get_settings().storage
    db_path = Path(db_path or storage.db_path)

    applied_now: list[str] = []
    conn = await open_connection(db_path, storage.busy_timeout)
    try:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                version TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                checksum TEXT NOT NULL,
                applied_at TEXT NOT NULL DEFAULT (datetime('now')),
                execution_time_ms INTEGER
            )
            """
        )

        applied = await get_applied_migrations(conn)
        for migration in MIGRATIONS:
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    logger.warning(
                        "migration_checksum_mismatch",
                        version=migration.version,
                        name=migration.name,
                    )
                continue

            start = time.perf_counter()
            await conn.execute("BEGIN IMMEDIATE")
            try:
                for statement in migration.statements:
                    await conn.execute(statement)
                elapsed_ms = int((time.perf_counter() - start) * 1000)
                await conn.execute(
                    """
                    INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
                    VALUES (?, ?, ?, ?)
                    """,
                    (migration.version, migration.name, migration.checksum, elapsed_ms),
                )
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                logger.error(
                    "migration_failed",
                    version=migration.version,
                    name=migration.name,
                    error=str(e),
                )
                raise

            applied_now.append(migration.version)
            logger.info(
                "migration_applied",
                version=migration.version,
                name=migration.name,
                execution_time_ms=elapsed_ms,
            )
    finally:
        await conn.close()

    return applied_now
