"""SQLite implementation of catalog storage."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from shopdesk.config import get_logger
from shopdesk.core.entities.product import Product, Warranty
from shopdesk.core.exceptions import PersistenceError
from shopdesk.core.interfaces.catalog_store import ICatalogStore
from shopdesk.core.interfaces.change_feed import ChangeKind, ChangeListener, Subscription
from shopdesk.infrastructure.storage.change_feed import ChangeFeed
from shopdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteCatalogStore(ICatalogStore):
    """SQLite implementation of the product catalog."""

    def __init__(self) -> None:
        self._feed = ChangeFeed("products")

    def subscribe(self, on_change: ChangeListener) -> Subscription:
        return self._feed.subscribe(on_change)

    async def list_products(self) -> list[Product]:
        """List all products, newest first."""
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM products ORDER BY created_at DESC, id"
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("list_products", str(e)) from e
        return [self._row_to_product(r) for r in rows]

    async def get_product(self, product_id: str) -> Product | None:
        """Get product by ID."""
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM products WHERE id = ?", (product_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError("get_product", str(e)) from e
        return self._row_to_product(row) if row else None

    async def create_product(self, product: Product) -> Product:
        """Insert a product, assigning an opaque ID if it has none."""
        stored = product.model_copy(update={"id": product.id or uuid.uuid4().hex})
        warranty = stored.warranty
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO products (
                        id, name, price, has_warranty, warranty_months, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        stored.id,
                        stored.name,
                        str(stored.price),
                        int(warranty.has_warranty) if warranty else None,
                        warranty.months if warranty else None,
                        stored.created_at.astimezone(UTC).isoformat(),
                    ),
                )
        except aiosqlite.Error as e:
            logger.error("product_create_failed", name=stored.name, error=str(e))
            raise PersistenceError("create_product", str(e)) from e

        logger.info("product_created", product_id=stored.id, name=stored.name)
        self._feed.publish(ChangeKind.CREATED, stored.id)
        return stored

    async def delete_product(self, product_id: str) -> bool:
        """Delete a product. Sale lines referencing it are left as they are."""
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    "DELETE FROM products WHERE id = ?", (product_id,)
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise PersistenceError("delete_product", str(e)) from e

        if deleted:
            logger.info("product_deleted", product_id=product_id)
            self._feed.publish(ChangeKind.DELETED, product_id)
        return deleted

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        """Convert a database row to a Product entity."""
        warranty = None
        if row["has_warranty"] is not None:
            warranty = Warranty(
                has_warranty=bool(row["has_warranty"]),
                months=row["warranty_months"] or 0,
            )

        created_at = datetime.fromisoformat(row["created_at"])
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)

        return Product(
            id=row["id"],
            name=row["name"],
            price=Decimal(row["price"]),
            warranty=warranty,
            created_at=created_at,
        )
