"""
Render Invoice Use Case.

Produces the invoice PDF of an existing sale on demand.
"""

from dataclasses import dataclass

from shopdesk.config import get_logger, shop_timezone
from shopdesk.core.exceptions import SaleNotFoundError
from shopdesk.core.interfaces.catalog_store import ICatalogStore
from shopdesk.core.interfaces.delivery import IInvoiceRenderer
from shopdesk.core.interfaces.sales_store import ISalesStore
from shopdesk.core.services.pricing import price_sale
from shopdesk.infrastructure.pdf.invoice_renderer import (
    CatalogNameResolver,
    Fpdf2InvoiceRenderer,
    invoice_filename,
)

logger = get_logger(__name__)


@dataclass
class RenderInvoiceResult:
    """Rendered invoice document."""

    pdf_bytes: bytes
    sale_id: str
    filename: str

    @property
    def file_size(self) -> int:
        return len(self.pdf_bytes)


class RenderInvoiceUseCase:
    """Use case for rendering a sale's invoice PDF."""

    def __init__(
        self,
        sales_store: ISalesStore | None = None,
        catalog_store: ICatalogStore | None = None,
        renderer: IInvoiceRenderer | None = None,
        timezone: str | None = None,
    ):
        self._sales_store = sales_store
        self._catalog_store = catalog_store
        self._renderer = renderer or Fpdf2InvoiceRenderer()
        self._tz = shop_timezone(timezone)

    async def _get_sales_store(self) -> ISalesStore:
        if self._sales_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_sales_store

            self._sales_store = await get_sales_store()
        return self._sales_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def execute(self, sale_id: str) -> RenderInvoiceResult:
        """
        Render the invoice of a sale.

        Raises:
            SaleNotFoundError: If the sale does not exist.
            RenderError: If the document could not be produced.
        """
        sale = await (await self._get_sales_store()).get_sale(sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)

        catalog = await (await self._get_catalog_store()).list_products()
        pdf_bytes = self._renderer.render(sale, price_sale(sale), CatalogNameResolver(catalog))

        logger.info("invoice_render_complete", sale_id=sale_id, file_size=len(pdf_bytes))
        return RenderInvoiceResult(
            pdf_bytes=pdf_bytes,
            sale_id=sale_id,
            filename=invoice_filename(sale, self._tz),
        )
