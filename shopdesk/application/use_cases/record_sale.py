"""
Record Sale Use Case.

Validates a sale form against the catalog, persists the sale and hands it
to invoice delivery.
"""

from dataclasses import dataclass
from datetime import datetime

from shopdesk.application.dto.requests import RecordSaleRequest
from shopdesk.application.dto.responses import SaleResponse
from shopdesk.application.use_cases.deliver_invoice import DeliverInvoiceUseCase
from shopdesk.config import get_logger
from shopdesk.core.entities.product import Product
from shopdesk.core.entities.sale import Sale
from shopdesk.core.exceptions import PersistenceError, SaleNotFoundError
from shopdesk.core.interfaces.catalog_store import ICatalogStore
from shopdesk.core.interfaces.sales_store import ISalesStore
from shopdesk.core.services.pricing import SalePricing, price_sale
from shopdesk.core.services.sale_validator import SaleDraft

logger = get_logger(__name__)


@dataclass
class RecordSaleResult:
    """Result of recording a sale."""

    sale: Sale
    pricing: SalePricing


class RecordSaleUseCase:
    """
    Use case for recording a sale.

    Flow:
    1. Load the catalog
    2. Build a sale draft from the form and submit it
    3. Persist the accepted sale (a failure here writes nothing)
    4. Deliver the invoice, now or via ``deliver_later``; failures are
       recorded on the sale
    """

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        sales_store: ISalesStore | None = None,
        deliver_invoice: DeliverInvoiceUseCase | None = None,
    ):
        self._catalog_store = catalog_store
        self._sales_store = sales_store
        self._deliver_invoice = deliver_invoice

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def _get_sales_store(self) -> ISalesStore:
        if self._sales_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_sales_store

            self._sales_store = await get_sales_store()
        return self._sales_store

    def _get_deliver_invoice(self) -> DeliverInvoiceUseCase:
        if self._deliver_invoice is None:
            self._deliver_invoice = DeliverInvoiceUseCase(
                sales_store=self._sales_store,
                catalog_store=self._catalog_store,
            )
        return self._deliver_invoice

    @staticmethod
    def build_draft(request: RecordSaleRequest, catalog: dict[str, Product]) -> SaleDraft:
        """Replay the sell form onto a draft."""
        draft = SaleDraft(
            username=request.username,
            phone_number=request.phone_number,
            payment_method=request.payment_method,
            lines=[],
            discount=request.discount,
        )
        for line in request.products:
            index = draft.add_line()
            product = catalog.get(line.product_id) if line.product_id else None
            if product is not None:
                draft.select_product(index, product)
                price = line.price if line.price is not None else product.price
            else:
                draft.type_product_name(index, line.product_name)
                price = line.price if line.price is not None else 0
            draft.set_line_price(index, price, line.discount_price)
        return draft

    async def execute(
        self,
        request: RecordSaleRequest,
        now: datetime | None = None,
        deliver: bool | None = None,
    ) -> RecordSaleResult:
        """
        Record a sale.

        ``deliver`` overrides the request flag; the HTTP route passes False
        and schedules ``deliver_later`` once the response is sent.

        Raises:
            ValidationError: If the form is invalid; nothing is written.
            PersistenceError: If the sale could not be stored.
        """
        catalog_store = await self._get_catalog_store()
        catalog = {p.id: p for p in await catalog_store.list_products() if p.id}

        draft = self.build_draft(request, catalog)
        sale = draft.submit(catalog, now=now)

        store = await self._get_sales_store()
        sale = await store.create_sale(sale)
        pricing = price_sale(sale)
        logger.info(
            "sale_recorded",
            sale_id=sale.id,
            lines=len(sale.products),
            payment_method=sale.payment_method.value,
            final_total=pricing.final_total,
        )

        if deliver is None:
            deliver = request.deliver
        if deliver:
            delivery = await self._get_deliver_invoice().execute(sale)
            sale = delivery.sale

        return RecordSaleResult(sale=sale, pricing=pricing)

    @staticmethod
    def to_response(result: RecordSaleResult) -> SaleResponse:
        return SaleResponse.from_entity(result.sale, result.pricing)

    async def deliver_later(self, sale_id: str) -> None:
        """Deliver a stored sale's invoice outside the recording request."""
        try:
            await self._get_deliver_invoice().execute(sale_id)
        except (SaleNotFoundError, PersistenceError) as e:
            logger.warning("background_delivery_failed", sale_id=sale_id, error=e.message)
