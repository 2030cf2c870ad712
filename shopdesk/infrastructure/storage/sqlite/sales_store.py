"""SQLite implementation of sale record storage."""

from collections import defaultdict
from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from shopdesk.config import get_logger
from shopdesk.core.entities.product import Warranty
from shopdesk.core.entities.sale import (
    InvoiceStatus,
    NotificationStatus,
    PaymentMethod,
    Sale,
    SaleLineItem,
)
from shopdesk.core.exceptions import PersistenceError, SaleNotFoundError
from shopdesk.core.interfaces.change_feed import ChangeKind, ChangeListener, Subscription
from shopdesk.core.interfaces.sales_store import ISalesStore
from shopdesk.infrastructure.storage.change_feed import ChangeFeed
from shopdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteSalesStore(ISalesStore):
    """SQLite implementation of sale record storage."""

    def __init__(self) -> None:
        self._feed = ChangeFeed("sales")

    def subscribe(self, on_change: ChangeListener) -> Subscription:
        return self._feed.subscribe(on_change)

    async def create_sale(self, sale: Sale) -> Sale:
        """Insert a sale header and all of its lines in one transaction.

        Timestamps are stored in UTC so their ISO text sorts chronologically.
        """
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO sales (
                        id, username, phone_number, payment_method, discount,
                        timestamp, invoice_url, invoice_status,
                        notification_status, last_error
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        sale.id,
                        sale.username,
                        sale.phone_number,
                        sale.payment_method.value,
                        str(sale.discount),
                        sale.timestamp.astimezone(UTC).isoformat(),
                        sale.invoice_url,
                        sale.invoice_status.value,
                        sale.notification_status.value,
                        sale.last_error,
                    ),
                )
                await conn.executemany(
                    """
                    INSERT INTO sale_items (
                        sale_id, position, product_id, product_name, price,
                        discount_price, has_warranty, warranty_months
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            sale.id,
                            position,
                            line.product_id,
                            line.product_name,
                            str(line.price),
                            str(line.discount_price)
                            if line.discount_price is not None
                            else None,
                            int(line.warranty.has_warranty) if line.warranty else None,
                            line.warranty.months if line.warranty else None,
                        )
                        for position, line in enumerate(sale.products)
                    ],
                )
        except aiosqlite.Error as e:
            logger.error("sale_create_failed", sale_id=sale.id, error=str(e))
            raise PersistenceError("create_sale", str(e)) from e

        logger.info("sale_created", sale_id=sale.id, lines=len(sale.products))
        self._feed.publish(ChangeKind.CREATED, sale.id)
        return sale

    async def get_sale(self, sale_id: str) -> Sale | None:
        """Get a sale with its lines in their original order."""
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
                row = await cursor.fetchone()
                if row is None:
                    return None

                items_cursor = await conn.execute(
                    "SELECT * FROM sale_items WHERE sale_id = ? ORDER BY position",
                    (sale_id,),
                )
                item_rows = await items_cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("get_sale", str(e)) from e

        return self._row_to_sale(row, [self._row_to_line(r) for r in item_rows])

    async def list_sales(self) -> list[Sale]:
        """List all sales, newest first."""
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM sales ORDER BY timestamp DESC, id"
                )
                rows = await cursor.fetchall()
                items_cursor = await conn.execute(
                    "SELECT * FROM sale_items ORDER BY sale_id, position"
                )
                item_rows = await items_cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("list_sales", str(e)) from e

        lines_by_sale: dict[str, list[SaleLineItem]] = defaultdict(list)
        for item_row in item_rows:
            lines_by_sale[item_row["sale_id"]].append(self._row_to_line(item_row))

        return [self._row_to_sale(r, lines_by_sale[r["id"]]) for r in rows]

    async def delete_sale(self, sale_id: str) -> bool:
        """Delete a sale and its lines."""
        try:
            async with get_transaction() as conn:
                await conn.execute("DELETE FROM sale_items WHERE sale_id = ?", (sale_id,))
                cursor = await conn.execute("DELETE FROM sales WHERE id = ?", (sale_id,))
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise PersistenceError("delete_sale", str(e)) from e

        if deleted:
            logger.info("sale_deleted", sale_id=sale_id)
            self._feed.publish(ChangeKind.DELETED, sale_id)
        return deleted

    async def update_invoice(
        self,
        sale_id: str,
        status: InvoiceStatus,
        invoice_url: str | None = None,
        error: str | None = None,
    ) -> Sale:
        """Set invoice status; a given URL replaces the stored one."""
        await self._update(
            "update_invoice",
            sale_id,
            """
            UPDATE sales
            SET invoice_status = ?, invoice_url = COALESCE(?, invoice_url), last_error = ?
            WHERE id = ?
            """,
            (status.value, invoice_url, error, sale_id),
        )
        logger.info("sale_invoice_status", sale_id=sale_id, status=status.value)
        return await self._require(sale_id)

    async def update_notification(
        self,
        sale_id: str,
        status: NotificationStatus,
        error: str | None = None,
    ) -> Sale:
        """Set notification status."""
        await self._update(
            "update_notification",
            sale_id,
            "UPDATE sales SET notification_status = ?, last_error = ? WHERE id = ?",
            (status.value, error, sale_id),
        )
        logger.info("sale_notification_status", sale_id=sale_id, status=status.value)
        return await self._require(sale_id)

    async def _update(
        self, operation: str, sale_id: str, sql: str, params: tuple
    ) -> None:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(sql, params)
                updated = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise PersistenceError(operation, str(e)) from e
        if not updated:
            raise SaleNotFoundError(sale_id)
        self._feed.publish(ChangeKind.UPDATED, sale_id)

    async def _require(self, sale_id: str) -> Sale:
        sale = await self.get_sale(sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)
        return sale

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row, lines: list[SaleLineItem]) -> Sale:
        """Convert a database row to a Sale entity."""
        timestamp = datetime.fromisoformat(row["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)

        return Sale(
            id=row["id"],
            username=row["username"],
            phone_number=row["phone_number"],
            payment_method=PaymentMethod(row["payment_method"]),
            products=tuple(lines),
            discount=Decimal(row["discount"]),
            timestamp=timestamp,
            invoice_url=row["invoice_url"],
            invoice_status=InvoiceStatus(row["invoice_status"]),
            notification_status=NotificationStatus(row["notification_status"]),
            last_error=row["last_error"],
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> SaleLineItem:
        """Convert a database row to a SaleLineItem entity."""
        warranty = None
        if row["has_warranty"] is not None:
            warranty = Warranty(
                has_warranty=bool(row["has_warranty"]),
                months=row["warranty_months"] or 0,
            )

        return SaleLineItem(
            product_id=row["product_id"],
            product_name=row["product_name"],
            price=Decimal(row["price"]),
            discount_price=(
                Decimal(row["discount_price"])
                if row["discount_price"] is not None
                else None
            ),
            warranty=warranty,
        )
