"""Application use cases."""

from shopdesk.application.use_cases.add_product import AddProductResult, AddProductUseCase
from shopdesk.application.use_cases.browse_dashboard import (
    BrowseDashboardUseCase,
    ProductListing,
    SaleListing,
)
from shopdesk.application.use_cases.deliver_invoice import (
    DeliverInvoiceUseCase,
    DeliveryResult,
)
from shopdesk.application.use_cases.record_sale import RecordSaleResult, RecordSaleUseCase
from shopdesk.application.use_cases.render_invoice import (
    RenderInvoiceResult,
    RenderInvoiceUseCase,
)
from shopdesk.application.use_cases.verify_sale import VerifySaleResult, VerifySaleUseCase

__all__ = [
    "AddProductResult",
    "AddProductUseCase",
    "BrowseDashboardUseCase",
    "ProductListing",
    "SaleListing",
    "DeliverInvoiceUseCase",
    "DeliveryResult",
    "RecordSaleResult",
    "RecordSaleUseCase",
    "RenderInvoiceResult",
    "RenderInvoiceUseCase",
    "VerifySaleResult",
    "VerifySaleUseCase",
]
