"""
Sale pricing engine.

Pure, synchronous computation of line prices and sale totals. Every surface
that shows money (sale preview, dashboard, invoice PDF, verification page)
goes through this module so that they all agree.

The sale-level ``discount`` is always a flat currency amount:

    raw_subtotal   = sum(line.price)
    net_subtotal   = sum(line display price)
    final_total    = net_subtotal - discount
    total_discount = raw_subtotal - final_total

Arithmetic is done on unrounded ``Decimal`` values; rounding to two places
happens only in the presentation helpers.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from shopdesk.core.entities.sale import Sale
from shopdesk.core.exceptions import InvalidLineError, ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal(0)


class PricedLine(Protocol):
    """Anything with a face price and an optional discount price."""

    @property
    def price(self) -> Decimal: ...

    @property
    def discount_price(self) -> Decimal | None: ...


@dataclass(frozen=True)
class LineInput:
    """Minimal priced line, for pricing data that is not a stored sale."""

    price: Decimal
    discount_price: Decimal | None = None


def as_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a form value to Decimal via its string form, so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Round a value to cents for presentation."""
    return as_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal | int | float | str) -> str:
    """Format a value as a 2-decimal string, e.g. '1234.50'."""
    return f"{to_money(value):.2f}"


def _validated_display_price(index: int, line: PricedLine) -> Decimal:
    price = as_decimal(line.price)
    if line.discount_price is None:
        return price
    discount_price = as_decimal(line.discount_price)
    if discount_price < ZERO or discount_price > price:
        raise InvalidLineError(index, price, discount_price)
    return discount_price


def line_display_price(line: PricedLine, index: int = 0) -> Decimal:
    """
    Unit price shown for a line.

    The discount price when present, otherwise the face price.

    Raises:
        InvalidLineError: If the discount price is negative or above the price.
    """
    return _validated_display_price(index, line)


@dataclass(frozen=True)
class LinePricing:
    """Computed prices for one sale line."""

    index: int
    price: Decimal
    display_price: Decimal

    @property
    def is_discounted(self) -> bool:
        return self.display_price != self.price

    @property
    def line_discount(self) -> Decimal:
        return self.price - self.display_price

    @property
    def display_text(self) -> str:
        """Price string as listed on the dashboard."""
        if self.is_discounted:
            return f"{format_money(self.display_price)} (Discounted)"
        return format_money(self.display_price)


@dataclass(frozen=True)
class SalePricing:
    """Totals for a sale. All amounts are unrounded."""

    lines: tuple[LinePricing, ...]
    raw_subtotal: Decimal
    net_subtotal: Decimal
    per_line_discount_total: Decimal
    discount: Decimal
    final_total: Decimal
    total_discount: Decimal

    def display(self) -> dict[str, str]:
        """Two-decimal strings for every total."""
        return {
            "raw_subtotal": format_money(self.raw_subtotal),
            "net_subtotal": format_money(self.net_subtotal),
            "per_line_discount_total": format_money(self.per_line_discount_total),
            "discount": format_money(self.discount),
            "final_total": format_money(self.final_total),
            "total_discount": format_money(self.total_discount),
        }


def price_lines(
    lines: Iterable[PricedLine],
    discount: Decimal | int | str = ZERO,
) -> SalePricing:
    """
    Price a sequence of lines with a flat sale discount.

    Raises:
        InvalidLineError: If a line discount price is outside [0, price].
        ValidationError: If the flat discount is negative.
    """
    flat = as_decimal(discount)
    if flat < ZERO:
        raise ValidationError("discount", "discount cannot be negative", flat)

    priced: list[LinePricing] = []
    for index, line in enumerate(lines):
        priced.append(
            LinePricing(
                index=index,
                price=as_decimal(line.price),
                display_price=_validated_display_price(index, line),
            )
        )

    raw_subtotal = sum((p.price for p in priced), ZERO)
    net_subtotal = sum((p.display_price for p in priced), ZERO)
    final_total = net_subtotal - flat

    return SalePricing(
        lines=tuple(priced),
        raw_subtotal=raw_subtotal,
        net_subtotal=net_subtotal,
        per_line_discount_total=raw_subtotal - net_subtotal,
        discount=flat,
        final_total=final_total,
        total_discount=raw_subtotal - final_total,
    )


def price_sale(sale: Sale) -> SalePricing:
    """Price a recorded sale."""
    return price_lines(sale.products, sale.discount)
