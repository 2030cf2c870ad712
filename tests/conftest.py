"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

# Keep the app's data directory and gateway away from real resources before
# any shopdesk module reads settings.
os.environ.setdefault("STORAGE_DATA_DIR", tempfile.mkdtemp(prefix="shopdesk-tests-"))
os.environ.setdefault("NOTIFY_ENABLED", "false")

from shopdesk.core.entities import (  # noqa: E402
    PaymentMethod,
    Product,
    Sale,
    SaleLineItem,
    Warranty,
)
from shopdesk.core.interfaces import IDocumentStorage, IInvoiceRenderer, INotifier  # noqa: E402


@pytest.fixture
def cable() -> Product:
    """Catalog product without warranty."""
    return Product(
        id="p-cable",
        name="USB Cable",
        price=Decimal("100"),
        created_at=datetime(2024, 3, 5, 9, 0, tzinfo=UTC),
    )


@pytest.fixture
def charger() -> Product:
    """Catalog product with a 6 month warranty."""
    return Product(
        id="p-charger",
        name="Fast Charger",
        price=Decimal("250"),
        warranty=Warranty(has_warranty=True, months=6),
        created_at=datetime(2024, 3, 6, 9, 0, tzinfo=UTC),
    )


@pytest.fixture
def sample_sale(cable: Product, charger: Product) -> Sale:
    """Recorded sale of a cable and a charger with a flat discount of 50."""
    return Sale(
        id="sale-1",
        username="Asha Rao",
        phone_number="9876543210",
        payment_method=PaymentMethod.CASH,
        products=(
            SaleLineItem(
                product_id=cable.id,
                product_name=cable.name,
                price=cable.price,
            ),
            SaleLineItem(
                product_id=charger.id,
                product_name=charger.name,
                price=charger.price,
                warranty=charger.warranty,
            ),
        ),
        discount=Decimal("50"),
        timestamp=datetime(2024, 3, 5, 10, 30, tzinfo=UTC),
    )


@pytest.fixture
def mock_catalog_store(cable: Product, charger: Product) -> AsyncMock:
    """Catalog store holding the cable and charger."""
    store = AsyncMock()
    store.list_products.return_value = [charger, cable]
    store.create_product.side_effect = lambda p: p.model_copy(update={"id": "p-new"})
    return store


@pytest.fixture
def mock_sales_store(sample_sale: Sale) -> AsyncMock:
    """Sales store whose status updates return the updated sale."""
    store = AsyncMock()
    store.get_sale.return_value = sample_sale
    store.list_sales.return_value = [sample_sale]

    def create_sale(sale):
        store.get_sale.return_value = sale
        return sale

    store.create_sale.side_effect = create_sale

    def update_invoice(sale_id, status, invoice_url=None, error=None):
        current = store.get_sale.return_value
        updated = current.model_copy(
            update={
                "invoice_status": status,
                "invoice_url": invoice_url or current.invoice_url,
                "last_error": error,
            }
        )
        store.get_sale.return_value = updated
        return updated

    def update_notification(sale_id, status, error=None):
        current = store.get_sale.return_value
        updated = current.model_copy(
            update={"notification_status": status, "last_error": error}
        )
        store.get_sale.return_value = updated
        return updated

    store.update_invoice.side_effect = update_invoice
    store.update_notification.side_effect = update_notification
    return store


@pytest.fixture
def mock_renderer() -> MagicMock:
    """Create mock PDF renderer."""
    renderer = MagicMock(spec=IInvoiceRenderer)
    renderer.render.return_value = b"%PDF-1.4 mock pdf content"
    return renderer


@pytest.fixture
def mock_document_storage() -> AsyncMock:
    storage = AsyncMock(spec=IDocumentStorage)
    storage.upload.return_value = "http://shop.test/files/invoices/Invoice_05-03-2024_sale-1.pdf"
    return storage


@pytest.fixture
def mock_notifier() -> AsyncMock:
    return AsyncMock(spec=INotifier)
