"""Request DTOs for API endpoints.

Fields are deliberately permissive: required-ness and ranges are checked by
the domain validators so that every input problem comes back as a
``ValidationError`` in a fixed order.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from shopdesk.core.entities.sale import PaymentMethod


class CreateProductRequest(BaseModel):
    """Request to add a catalog product."""

    name: str = Field(default="", description="Product name", examples=["USB Charger"])
    price: Decimal = Field(default=Decimal(0), description="Unit price", examples=["499.00"])
    has_warranty: bool = Field(default=False, description="Whether the product carries a warranty")
    warranty_months: int = Field(default=0, description="Warranty length in months")


class SaleLineRequest(BaseModel):
    """One line of a sale as entered on the sell form."""

    product_id: str = Field(
        default="",
        description="Catalog product ID; empty when the name was only typed",
    )
    product_name: str = Field(
        default="",
        description="Typed product name; replaced by the catalog name when a product is selected",
    )
    price: Decimal | None = Field(
        default=None,
        description="Unit price; defaults to the catalog price",
    )
    discount_price: Decimal | None = Field(
        default=None,
        description="Optional override unit price, between 0 and price",
    )


class RecordSaleRequest(BaseModel):
    """Request to record a sale and deliver its invoice."""

    username: str = Field(default="", description="Customer name")
    phone_number: str = Field(default="", description="Customer phone, 10 to 15 digits")
    payment_method: PaymentMethod | None = Field(
        default=PaymentMethod.CASH,
        description="Cash or Online",
    )
    products: list[SaleLineRequest] = Field(default_factory=list)
    discount: Decimal = Field(
        default=Decimal(0),
        description="Flat currency amount taken off the discounted subtotal",
    )
    deliver: bool = Field(
        default=True,
        description="Render, upload and send the invoice after recording",
    )
