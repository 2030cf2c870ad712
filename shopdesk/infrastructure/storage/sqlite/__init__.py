"""SQLite storage implementations."""

from shopdesk.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from shopdesk.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    PoolStatus,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    open_connection,
)
from shopdesk.infrastructure.storage.sqlite.migrations import run_migrations
from shopdesk.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore

CatalogStore = SQLiteCatalogStore
SalesStore = SQLiteSalesStore

# Singleton instances
_catalog_store: SQLiteCatalogStore | None = None
_sales_store: SQLiteSalesStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_sales_store() -> SQLiteSalesStore:
    """Get singleton sales store instance."""
    global _sales_store
    if _sales_store is None:
        _sales_store = SQLiteSalesStore()
    return _sales_store


__all__ = [
    # Connection
    "ConnectionPool",
    "PoolStatus",
    "open_connection",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "run_migrations",
    # Store classes
    "SQLiteCatalogStore",
    "SQLiteSalesStore",
    "CatalogStore",
    "SalesStore",
    # Factory functions
    "get_catalog_store",
    "get_sales_store",
]
