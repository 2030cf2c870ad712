"""
Verify Sale Use Case.

Public, read-only priced view of a sale, using the same pricing and
rounding as every other surface.
"""

from dataclasses import dataclass
from datetime import UTC

from shopdesk.application.dto.responses import VerifySaleResponse
from shopdesk.config import shop_timezone
from shopdesk.core.entities.sale import Sale
from shopdesk.core.exceptions import SaleNotFoundError
from shopdesk.core.interfaces.sales_store import ISalesStore
from shopdesk.core.services.pricing import SalePricing, price_sale


@dataclass
class VerifySaleResult:
    sale: Sale
    pricing: SalePricing
    date: str


class VerifySaleUseCase:
    """Use case for the public sale verification page."""

    def __init__(
        self,
        sales_store: ISalesStore | None = None,
        timezone: str | None = None,
    ):
        self._sales_store = sales_store
        self._tz = shop_timezone(timezone)

    async def _get_sales_store(self) -> ISalesStore:
        if self._sales_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_sales_store

            self._sales_store = await get_sales_store()
        return self._sales_store

    async def execute(self, sale_id: str) -> VerifySaleResult:
        sale = await (await self._get_sales_store()).get_sale(sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)

        moment = sale.timestamp
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return VerifySaleResult(
            sale=sale,
            pricing=price_sale(sale),
            date=moment.astimezone(self._tz).strftime("%d-%m-%Y"),
        )

    @staticmethod
    def to_response(result: VerifySaleResult) -> VerifySaleResponse:
        return VerifySaleResponse.from_entity(result.sale, result.pricing, result.date)
