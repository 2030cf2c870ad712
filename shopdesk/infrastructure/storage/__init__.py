"""Storage infrastructure implementations."""

from shopdesk.infrastructure.storage.change_feed import ChangeFeed
from shopdesk.infrastructure.storage.files import (
    LocalDocumentStorage,
    get_document_storage,
)
from shopdesk.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteSalesStore,
    close_pool,
    get_catalog_store,
    get_connection,
    get_pool,
    get_sales_store,
    get_transaction,
)

__all__ = [
    "ChangeFeed",
    # SQLite stores
    "SQLiteCatalogStore",
    "SQLiteSalesStore",
    "get_catalog_store",
    "get_sales_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Documents
    "LocalDocumentStorage",
    "get_document_storage",
]
