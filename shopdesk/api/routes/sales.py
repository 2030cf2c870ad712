"""Sale endpoints."""

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.responses import Response

from shopdesk.api.dependencies import (
    get_browse_dashboard_use_case,
    get_deliver_invoice_use_case,
    get_record_sale_use_case,
    get_render_invoice_use_case,
    get_sales,
)
from shopdesk.application.dto.requests import RecordSaleRequest
from shopdesk.application.dto.responses import (
    DeliveryResponse,
    ErrorResponse,
    SaleListResponse,
    SaleResponse,
)
from shopdesk.application.use_cases import (
    BrowseDashboardUseCase,
    DeliverInvoiceUseCase,
    RecordSaleUseCase,
    RenderInvoiceUseCase,
)
from shopdesk.core.exceptions import SaleNotFoundError
from shopdesk.core.interfaces import ISalesStore
from shopdesk.core.services.pricing import price_sale

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def record_sale(
    request: RecordSaleRequest,
    background_tasks: BackgroundTasks,
    use_case: RecordSaleUseCase = Depends(get_record_sale_use_case),
) -> SaleResponse:
    """
    Record a sale.

    Responds once the sale is stored, with ``pending`` delivery statuses.
    The invoice is uploaded and sent after the response; poll
    ``GET /api/sales/{id}`` or the dashboard events for the outcome.
    """
    result = await use_case.execute(request, deliver=False)
    if request.deliver:
        background_tasks.add_task(use_case.deliver_later, result.sale.id)
    return use_case.to_response(result)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    search: str = Query(default="", description="Customer, phone or product name"),
    day: date | None = Query(default=None, alias="date", description="Recorded on this day"),
    use_case: BrowseDashboardUseCase = Depends(get_browse_dashboard_use_case),
) -> SaleListResponse:
    """List sales, newest first, each with its totals."""
    listing = await use_case.list_sales(search, day)
    return use_case.sales_response(listing)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: str,
    store: ISalesStore = Depends(get_sales),
) -> SaleResponse:
    """Get a sale with its totals and delivery status."""
    sale = await store.get_sale(sale_id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return SaleResponse.from_entity(sale, price_sale(sale))


@router.delete(
    "/{sale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_sale(
    sale_id: str,
    store: ISalesStore = Depends(get_sales),
) -> None:
    """Delete a sale."""
    if not await store.delete_sale(sale_id):
        raise SaleNotFoundError(sale_id)


@router.get(
    "/{sale_id}/invoice.pdf",
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def download_invoice(
    sale_id: str,
    use_case: RenderInvoiceUseCase = Depends(get_render_invoice_use_case),
) -> Response:
    """Render the invoice PDF of a sale."""
    result = await use_case.execute(sale_id)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{result.filename}"'},
    )


@router.post(
    "/{sale_id}/deliver",
    response_model=DeliveryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deliver_invoice(
    sale_id: str,
    use_case: DeliverInvoiceUseCase = Depends(get_deliver_invoice_use_case),
) -> DeliveryResponse:
    """Retry invoice upload and customer notification for a sale."""
    result = await use_case.execute(sale_id)
    return use_case.to_response(result)
