"""Catalog product endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from shopdesk.api.dependencies import (
    get_add_product_use_case,
    get_browse_dashboard_use_case,
    get_catalog,
)
from shopdesk.application.dto.requests import CreateProductRequest
from shopdesk.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from shopdesk.application.use_cases import AddProductUseCase, BrowseDashboardUseCase
from shopdesk.core.exceptions import ProductNotFoundError
from shopdesk.core.interfaces import ICatalogStore

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_product(
    request: CreateProductRequest,
    use_case: AddProductUseCase = Depends(get_add_product_use_case),
) -> ProductResponse:
    """Add a product to the catalog."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str = Query(default="", description="Case-insensitive name filter"),
    day: date | None = Query(default=None, alias="date", description="Created on this day"),
    use_case: BrowseDashboardUseCase = Depends(get_browse_dashboard_use_case),
) -> ProductListResponse:
    """List catalog products, newest first."""
    listing = await use_case.list_products(search, day)
    return use_case.products_response(listing)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: str,
    store: ICatalogStore = Depends(get_catalog),
) -> None:
    """Delete a product. Recorded sales keep their line snapshots."""
    if not await store.delete_product(product_id):
        raise ProductNotFoundError(product_id)
