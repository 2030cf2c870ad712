"""Core domain services."""

from shopdesk.core.services.filters import filter_products, filter_sales, sale_matches
from shopdesk.core.services.pricing import (
    LineInput,
    LinePricing,
    SalePricing,
    as_decimal,
    format_money,
    line_display_price,
    price_lines,
    price_sale,
    to_money,
)
from shopdesk.core.services.sale_validator import DraftLine, DraftState, SaleDraft

__all__ = [
    # Pricing
    "LineInput",
    "LinePricing",
    "SalePricing",
    "as_decimal",
    "format_money",
    "line_display_price",
    "price_lines",
    "price_sale",
    "to_money",
    # Validation
    "DraftLine",
    "DraftState",
    "SaleDraft",
    # Dashboard filters
    "filter_products",
    "filter_sales",
    "sale_matches",
]
