"""PDF generation infrastructure."""

from shopdesk.infrastructure.pdf.invoice_renderer import (
    UNKNOWN_PRODUCT,
    CatalogNameResolver,
    Fpdf2InvoiceRenderer,
    invoice_filename,
    invoice_path,
)

__all__ = [
    "UNKNOWN_PRODUCT",
    "CatalogNameResolver",
    "Fpdf2InvoiceRenderer",
    "invoice_filename",
    "invoice_path",
]
