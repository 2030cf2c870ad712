"""Sale record domain entities."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shopdesk.core.entities.product import Warranty


class PaymentMethod(str, Enum):
    """How the customer paid."""

    CASH = "Cash"
    ONLINE = "Online"


class InvoiceStatus(str, Enum):
    """Lifecycle of the invoice document attached to a sale."""

    PENDING = "pending"
    UPLOADED = "uploaded"
    FAILED = "failed"


class NotificationStatus(str, Enum):
    """Lifecycle of the customer notification for a sale."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"  # no invoice URL to send


class SaleLineItem(BaseModel):
    """One product line on a sale, snapshotted at sale time."""

    model_config = ConfigDict(frozen=True)

    product_id: str  # may dangle once the product is deleted
    product_name: str
    price: Decimal = Field(ge=0)
    discount_price: Decimal | None = None
    warranty: Warranty | None = None

    @model_validator(mode="after")
    def check_discount_price(self) -> "SaleLineItem":
        """Keep a line discount price within [0, price]."""
        if self.discount_price is not None and not (
            Decimal(0) <= self.discount_price <= self.price
        ):
            raise ValueError("discount_price must be between 0 and price")
        return self


class Sale(BaseModel):
    """A recorded sale. Immutable; status changes go through the store."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    phone_number: str
    payment_method: PaymentMethod
    products: tuple[SaleLineItem, ...] = Field(min_length=1)
    discount: Decimal = Field(default=Decimal(0), ge=0)  # flat currency amount
    timestamp: datetime
    invoice_url: str | None = None
    invoice_status: InvoiceStatus = InvoiceStatus.PENDING
    notification_status: NotificationStatus = NotificationStatus.PENDING
    last_error: str | None = None

    @field_validator("timestamp")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @model_validator(mode="after")
    def check_discount(self) -> "Sale":
        """Discount may not exceed the sum of line face prices."""
        face_total = sum((line.price for line in self.products), Decimal(0))
        if self.discount > face_total:
            raise ValueError("discount exceeds subtotal")
        return self
