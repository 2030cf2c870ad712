"""API tests for catalog product endpoints."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from shopdesk.api.dependencies import (
    get_add_product_use_case,
    get_browse_dashboard_use_case,
    get_catalog,
)
from shopdesk.api.main import app
from shopdesk.application.use_cases import AddProductUseCase, BrowseDashboardUseCase
from shopdesk.core.exceptions import PersistenceError


def _use_catalog(mock_catalog_store: AsyncMock, mock_sales_store: AsyncMock) -> None:
    app.dependency_overrides[get_add_product_use_case] = lambda: AddProductUseCase(
        catalog_store=mock_catalog_store
    )
    app.dependency_overrides[get_browse_dashboard_use_case] = lambda: BrowseDashboardUseCase(
        catalog_store=mock_catalog_store, sales_store=mock_sales_store, timezone="UTC"
    )
    app.dependency_overrides[get_catalog] = lambda: mock_catalog_store


async def test_create_product(client: AsyncClient, mock_catalog_store, mock_sales_store):
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.post(
        "/api/products",
        json={"name": "Earphones", "price": "349.5", "has_warranty": True, "warranty_months": 3},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "p-new"
    assert data["price"] == "349.50"
    assert data["warranty"] == "3 months"


async def test_create_product_validation_error(
    client: AsyncClient, mock_catalog_store, mock_sales_store
):
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.post("/api/products", json={"name": "Cable", "price": "0"})

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "VALIDATION_ERROR"
    assert "field=price" in data["detail"]
    assert data["path"] == "/api/products"
    mock_catalog_store.create_product.assert_not_called()


async def test_create_product_malformed_body(
    client: AsyncClient, mock_catalog_store, mock_sales_store
):
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.post("/api/products", json={"name": "Cable", "price": "abc"})

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


async def test_create_product_store_failure(
    client: AsyncClient, mock_catalog_store, mock_sales_store
):
    mock_catalog_store.create_product.side_effect = PersistenceError("create_product", "locked")
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.post("/api/products", json={"name": "Cable", "price": "10"})

    assert response.status_code == 503
    assert response.json()["error_code"] == "PERSISTENCE_ERROR"


async def test_list_products(client: AsyncClient, mock_catalog_store, mock_sales_store):
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.get("/api/products")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [p["name"] for p in data["products"]] == ["Fast Charger", "USB Cable"]


async def test_list_products_filters(client: AsyncClient, mock_catalog_store, mock_sales_store):
    _use_catalog(mock_catalog_store, mock_sales_store)

    by_search = await client.get("/api/products", params={"search": "CABLE"})
    by_date = await client.get("/api/products", params={"date": "2024-03-06"})

    assert [p["id"] for p in by_search.json()["products"]] == ["p-cable"]
    assert [p["id"] for p in by_date.json()["products"]] == ["p-charger"]


async def test_delete_product(client: AsyncClient, mock_catalog_store, mock_sales_store):
    mock_catalog_store.delete_product.return_value = True
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.delete("/api/products/p-cable")

    assert response.status_code == 204
    mock_catalog_store.delete_product.assert_awaited_once_with("p-cable")


async def test_delete_missing_product(client: AsyncClient, mock_catalog_store, mock_sales_store):
    mock_catalog_store.delete_product.return_value = False
    _use_catalog(mock_catalog_store, mock_sales_store)

    response = await client.delete("/api/products/nope")

    assert response.status_code == 404
    assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"
