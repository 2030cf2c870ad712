"""Core domain entities."""

from shopdesk.core.entities.product import Product, Warranty, warranty_text
from shopdesk.core.entities.sale import (
    InvoiceStatus,
    NotificationStatus,
    PaymentMethod,
    Sale,
    SaleLineItem,
)

__all__ = [
    # Catalog
    "Product",
    "Warranty",
    "warranty_text",
    # Sales
    "InvoiceStatus",
    "NotificationStatus",
    "PaymentMethod",
    "Sale",
    "SaleLineItem",
]
