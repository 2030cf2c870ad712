"""
Dependency injection container for FastAPI.

Provides store and use case instances to route handlers.
"""

from functools import lru_cache

from shopdesk.application.use_cases import (
    AddProductUseCase,
    BrowseDashboardUseCase,
    DeliverInvoiceUseCase,
    RecordSaleUseCase,
    RenderInvoiceUseCase,
    VerifySaleUseCase,
)
from shopdesk.config import Settings, get_settings
from shopdesk.core.interfaces import ICatalogStore, ISalesStore
from shopdesk.infrastructure.storage.sqlite import get_catalog_store, get_sales_store


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_catalog() -> ICatalogStore:
    """Get catalog store."""
    return await get_catalog_store()


async def get_sales() -> ISalesStore:
    """Get sales store."""
    return await get_sales_store()


# Use case dependencies
def get_add_product_use_case() -> AddProductUseCase:
    """Get add product use case."""
    return AddProductUseCase()


def get_record_sale_use_case() -> RecordSaleUseCase:
    """Get record sale use case."""
    return RecordSaleUseCase()


def get_deliver_invoice_use_case() -> DeliverInvoiceUseCase:
    """Get deliver invoice use case."""
    return DeliverInvoiceUseCase()


def get_render_invoice_use_case() -> RenderInvoiceUseCase:
    """Get render invoice use case."""
    return RenderInvoiceUseCase()


def get_verify_sale_use_case() -> VerifySaleUseCase:
    """Get verify sale use case."""
    return VerifySaleUseCase()


def get_browse_dashboard_use_case() -> BrowseDashboardUseCase:
    """Get dashboard use case."""
    return BrowseDashboardUseCase()
