"""Response DTOs for API endpoints.

Money is serialized as two-decimal strings produced by the pricing engine.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from shopdesk.core.entities.product import Product
from shopdesk.core.entities.sale import Sale
from shopdesk.core.services.pricing import SalePricing, format_money


class ProductResponse(BaseModel):
    """Catalog product."""

    id: str
    name: str
    price: str = Field(..., description="Unit price, two decimals")
    has_warranty: bool = False
    warranty_months: int = 0
    warranty: str = Field(..., description="'<n> months' or 'N/A'")
    created_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        w = product.warranty
        return cls(
            id=product.id or "",
            name=product.name,
            price=format_money(product.price),
            has_warranty=bool(w and w.has_warranty),
            warranty_months=w.months if w else 0,
            warranty=w.text if w else "N/A",
            created_at=product.created_at,
        )


class ProductListResponse(BaseModel):
    """Filtered product list."""

    products: list[ProductResponse] = Field(default=[])
    total: int


class SaleLineResponse(BaseModel):
    """Priced sale line."""

    index: int
    product_id: str
    product_name: str
    price: str
    display_price: str
    display_text: str = Field(..., description="e.g. '180.00 (Discounted)'")
    is_discounted: bool
    warranty: str


class PricingResponse(BaseModel):
    """Sale totals, two decimals each."""

    raw_subtotal: str
    net_subtotal: str
    per_line_discount_total: str
    discount: str
    final_total: str
    total_discount: str

    @classmethod
    def from_pricing(cls, pricing: SalePricing) -> "PricingResponse":
        return cls(**pricing.display())


def _line_responses(sale: Sale, pricing: SalePricing) -> list[SaleLineResponse]:
    return [
        SaleLineResponse(
            index=priced.index,
            product_id=line.product_id,
            product_name=line.product_name,
            price=format_money(priced.price),
            display_price=format_money(priced.display_price),
            display_text=priced.display_text,
            is_discounted=priced.is_discounted,
            warranty=line.warranty.text if line.warranty else "N/A",
        )
        for line, priced in zip(sale.products, pricing.lines)
    ]


class SaleResponse(BaseModel):
    """Recorded sale with pricing and delivery status."""

    id: str
    username: str
    phone_number: str
    payment_method: str
    timestamp: datetime
    products: list[SaleLineResponse]
    pricing: PricingResponse
    invoice_url: str | None = None
    invoice_status: str
    notification_status: str
    last_error: str | None = None

    @classmethod
    def from_entity(cls, sale: Sale, pricing: SalePricing) -> "SaleResponse":
        return cls(
            id=sale.id,
            username=sale.username,
            phone_number=sale.phone_number,
            payment_method=sale.payment_method.value,
            timestamp=sale.timestamp,
            products=_line_responses(sale, pricing),
            pricing=PricingResponse.from_pricing(pricing),
            invoice_url=sale.invoice_url,
            invoice_status=sale.invoice_status.value,
            notification_status=sale.notification_status.value,
            last_error=sale.last_error,
        )


class SaleListResponse(BaseModel):
    """Filtered sale list."""

    sales: list[SaleResponse] = Field(default=[])
    total: int


class DeliveryResponse(BaseModel):
    """Outcome of an invoice delivery attempt."""

    sale_id: str
    invoice_status: str
    notification_status: str
    invoice_url: str | None = None
    last_error: str | None = None


class VerifySaleResponse(BaseModel):
    """Public read-only view of a sale."""

    sale_id: str
    username: str
    phone_number: str
    payment_method: str
    date: str = Field(..., description="Sale date, dd-mm-yyyy in the shop timezone")
    products: list[SaleLineResponse]
    pricing: PricingResponse

    @classmethod
    def from_entity(cls, sale: Sale, pricing: SalePricing, date: str) -> "VerifySaleResponse":
        return cls(
            sale_id=sale.id,
            username=sale.username,
            phone_number=sale.phone_number,
            payment_method=sale.payment_method.value,
            date=date,
            products=_line_responses(sale, pricing),
            pricing=PricingResponse.from_pricing(pricing),
        )


class ComponentHealthResponse(BaseModel):
    """Health of one dependency."""

    name: str
    healthy: bool
    latency_ms: float | None = None
    error: str | None = None

    # SQLite pool
    schema_version: str | None = None
    connections_open: int | None = None
    connections_in_use: int | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. SALE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
