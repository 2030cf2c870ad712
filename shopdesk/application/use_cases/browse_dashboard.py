"""
Browse Dashboard Use Case.

Lists products and sales with the dashboard's search and same-day filter.
Each sale is priced through the pricing engine.
"""

from dataclasses import dataclass, field
from datetime import date

from shopdesk.application.dto.responses import (
    ProductListResponse,
    ProductResponse,
    SaleListResponse,
    SaleResponse,
)
from shopdesk.config import get_logger, shop_timezone
from shopdesk.core.entities.product import Product
from shopdesk.core.entities.sale import Sale
from shopdesk.core.interfaces.catalog_store import ICatalogStore
from shopdesk.core.interfaces.sales_store import ISalesStore
from shopdesk.core.services.filters import filter_products, filter_sales
from shopdesk.core.services.pricing import SalePricing, price_sale

logger = get_logger(__name__)


@dataclass
class ProductListing:
    products: list[Product] = field(default_factory=list)


@dataclass
class SaleListing:
    sales: list[tuple[Sale, SalePricing]] = field(default_factory=list)


class BrowseDashboardUseCase:
    """Use case for the products and sales dashboard."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        sales_store: ISalesStore | None = None,
        timezone: str | None = None,
    ):
        self._catalog_store = catalog_store
        self._sales_store = sales_store
        self._tz = shop_timezone(timezone)

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

    async def list_products(self, search: str = "", day: date | None = None) -> ProductListing:
        products = await (await self._get_catalog_store()).list_products()
        matched = filter_products(products, search, day, self._tz)
        logger.debug("products_browsed", search=search, day=day, matched=len(matched))
        return ProductListing(products=matched)

    async def list_sales(self, search: str = "", day: date | None = None) -> SaleListing:
        sales = await (await self._get_sales_store()).list_sales()
        matched = filter_sales(sales, search, day, self._tz)
        logger.debug("sales_browsed", search=search, day=day, matched=len(matched))
        return SaleListing(sales=[(s, price_sale(s)) for s in matched])

    @staticmethod
    def products_response(listing: ProductListing) -> ProductListResponse:
        return ProductListResponse(
            products=[ProductResponse.from_entity(p) for p in listing.products],
            total=len(listing.products),
        )

    @staticmethod
    def sales_response(listing: SaleListing) -> SaleListResponse:
        return SaleListResponse(
            sales=[SaleResponse.from_entity(s, p) for s, p in listing.sales],
            total=len(listing.sales),
        )
