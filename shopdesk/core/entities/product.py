"""Catalog product entities."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Warranty(BaseModel):
    """Warranty terms attached to a product or snapshotted onto a sale line."""

    model_config = ConfigDict(frozen=True)

    has_warranty: bool = False
    months: int = Field(default=0, ge=0)

    @property
    def text(self) -> str:
        """Human readable warranty, e.g. '12 months' or 'N/A'."""
        if self.has_warranty:
            return f"{self.months} months"
        return "N/A"


class Product(BaseModel):
    """A purchasable catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    price: Decimal = Field(ge=0)
    warranty: Warranty | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def warranty_text(warranty: Warranty | None) -> str:
    """Warranty text for an optional warranty snapshot."""
    return warranty.text if warranty is not None else "N/A"
