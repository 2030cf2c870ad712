"""API tests for sale endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from shopdesk.api.dependencies import (
    get_browse_dashboard_use_case,
    get_deliver_invoice_use_case,
    get_record_sale_use_case,
    get_render_invoice_use_case,
    get_sales,
)
from shopdesk.api.main import app
from shopdesk.application.use_cases import (
    BrowseDashboardUseCase,
    DeliverInvoiceUseCase,
    RecordSaleUseCase,
    RenderInvoiceUseCase,
)
from shopdesk.core.exceptions import DispatchError, PersistenceError, RenderError

SALE_FORM = {
    "username": "Asha Rao",
    "phone_number": "9876543210",
    "payment_method": "Online",
    "products": [
        {"product_id": "p-cable"},
        {"product_id": "p-charger", "discount_price": "200"},
    ],
    "discount": "25",
}


@pytest.fixture
def deliver_use_case(
    mock_sales_store: AsyncMock,
    mock_catalog_store: AsyncMock,
    mock_renderer: MagicMock,
    mock_document_storage: AsyncMock,
    mock_notifier: AsyncMock,
) -> DeliverInvoiceUseCase:
    return DeliverInvoiceUseCase(
        sales_store=mock_sales_store,
        catalog_store=mock_catalog_store,
        renderer=mock_renderer,
        document_storage=mock_document_storage,
        notifier=mock_notifier,
        timezone="UTC",
    )


@pytest.fixture
def overrides(
    mock_sales_store: AsyncMock,
    mock_catalog_store: AsyncMock,
    mock_renderer: MagicMock,
    deliver_use_case: DeliverInvoiceUseCase,
) -> None:
    app.dependency_overrides[get_record_sale_use_case] = lambda: RecordSaleUseCase(
        catalog_store=mock_catalog_store,
        sales_store=mock_sales_store,
        deliver_invoice=deliver_use_case,
    )
    app.dependency_overrides[get_deliver_invoice_use_case] = lambda: deliver_use_case
    app.dependency_overrides[get_render_invoice_use_case] = lambda: RenderInvoiceUseCase(
        sales_store=mock_sales_store,
        catalog_store=mock_catalog_store,
        renderer=mock_renderer,
        timezone="UTC",
    )
    app.dependency_overrides[get_browse_dashboard_use_case] = lambda: BrowseDashboardUseCase(
        catalog_store=mock_catalog_store, sales_store=mock_sales_store, timezone="UTC"
    )
    app.dependency_overrides[get_sales] = lambda: mock_sales_store


async def test_record_sale(
    client: AsyncClient, overrides, mock_sales_store: AsyncMock, mock_notifier: AsyncMock
):
    response = await client.post("/api/sales", json=SALE_FORM)

    assert response.status_code == 201
    data = response.json()
    assert data["payment_method"] == "Online"
    assert data["pricing"]["raw_subtotal"] == "350.00"
    assert data["pricing"]["per_line_discount_total"] == "50.00"
    assert data["pricing"]["final_total"] == "275.00"
    assert data["products"][1]["display_text"] == "200.00 (Discounted)"
    assert data["invoice_status"] == "pending"
    assert data["notification_status"] == "pending"
    mock_sales_store.create_sale.assert_awaited_once()

    # Delivery runs as a background task after the response
    mock_notifier.send.assert_awaited_once()
    stored = (await client.get(f"/api/sales/{data['id']}")).json()
    assert stored["invoice_status"] == "uploaded"
    assert stored["notification_status"] == "sent"


async def test_record_sale_without_delivery(
    client: AsyncClient, overrides, mock_notifier: AsyncMock
):
    response = await client.post("/api/sales", json={**SALE_FORM, "deliver": False})

    assert response.status_code == 201
    assert response.json()["invoice_status"] == "pending"
    mock_notifier.send.assert_not_called()


async def test_record_sale_invalid_phone(
    client: AsyncClient, overrides, mock_sales_store: AsyncMock
):
    response = await client.post("/api/sales", json={**SALE_FORM, "phone_number": "98-76"})

    assert response.status_code == 400
    assert "field=phone_number" in response.json()["detail"]
    mock_sales_store.create_sale.assert_not_called()


async def test_record_sale_invalid_line_discount(client: AsyncClient, overrides):
    form = {**SALE_FORM, "products": [{"product_id": "p-cable", "discount_price": "150"}]}

    response = await client.post("/api/sales", json=form)

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_LINE"


async def test_record_sale_store_failure(
    client: AsyncClient, overrides, mock_sales_store: AsyncMock
):
    mock_sales_store.create_sale.side_effect = PersistenceError("create_sale", "disk full")

    response = await client.post("/api/sales", json=SALE_FORM)

    assert response.status_code == 503
    assert response.json()["error_code"] == "PERSISTENCE_ERROR"


async def test_record_sale_delivery_failure_still_created(
    client: AsyncClient, overrides, mock_notifier: AsyncMock
):
    mock_notifier.send.side_effect = DispatchError("gateway responded with HTTP 500", status=500)

    response = await client.post("/api/sales", json=SALE_FORM)

    assert response.status_code == 201
    sale_id = response.json()["id"]
    stored = (await client.get(f"/api/sales/{sale_id}")).json()
    assert stored["invoice_status"] == "uploaded"
    assert stored["notification_status"] == "failed"
    assert "HTTP 500" in stored["last_error"]


async def test_list_sales(client: AsyncClient, overrides):
    response = await client.get("/api/sales", params={"search": "543"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["sales"][0]["pricing"]["final_total"] == "300.00"


async def test_list_sales_other_day(client: AsyncClient, overrides):
    response = await client.get("/api/sales", params={"date": "2024-03-06"})

    assert response.json()["total"] == 0


async def test_get_sale(client: AsyncClient, overrides):
    response = await client.get("/api/sales/sale-1")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "sale-1"
    assert data["pricing"]["discount"] == "50.00"
    assert [line["warranty"] for line in data["products"]] == ["N/A", "6 months"]


async def test_get_missing_sale(client: AsyncClient, overrides, mock_sales_store: AsyncMock):
    mock_sales_store.get_sale.return_value = None

    response = await client.get("/api/sales/missing")

    assert response.status_code == 404
    data = response.json()
    assert data["error_code"] == "SALE_NOT_FOUND"
    assert data["hint"]


async def test_delete_sale(client: AsyncClient, overrides, mock_sales_store: AsyncMock):
    mock_sales_store.delete_sale.return_value = True

    response = await client.delete("/api/sales/sale-1")

    assert response.status_code == 204


async def test_delete_missing_sale(client: AsyncClient, overrides, mock_sales_store: AsyncMock):
    mock_sales_store.delete_sale.return_value = False

    response = await client.delete("/api/sales/missing")

    assert response.status_code == 404


async def test_download_invoice(client: AsyncClient, overrides):
    response = await client.get("/api/sales/sale-1/invoice.pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="Invoice_05-03-2024_sale-1.pdf"' in response.headers["content-disposition"]
    assert response.content == b"%PDF-1.4 mock pdf content"


async def test_download_invoice_render_failure(
    client: AsyncClient, overrides, mock_renderer: MagicMock
):
    mock_renderer.render.side_effect = RenderError("sale-1", "broken")

    response = await client.get("/api/sales/sale-1/invoice.pdf")

    assert response.status_code == 500
    assert response.json()["error_code"] == "RENDER_FAILED"


async def test_deliver_retry(client: AsyncClient, overrides):
    response = await client.post("/api/sales/sale-1/deliver")

    assert response.status_code == 200
    data = response.json()
    assert data["sale_id"] == "sale-1"
    assert data["invoice_status"] == "uploaded"
    assert data["notification_status"] == "sent"


async def test_deliver_missing_sale(client: AsyncClient, overrides, mock_sales_store: AsyncMock):
    mock_sales_store.get_sale.return_value = None

    response = await client.post("/api/sales/missing/deliver")

    assert response.status_code == 404
