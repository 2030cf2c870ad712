"""Dashboard search and same-day filtering for products and sales."""

from collections.abc import Iterable
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from shopdesk.core.entities.product import Product
from shopdesk.core.entities.sale import Sale


def _local_day(moment: datetime, tz: ZoneInfo) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz).date()


def filter_products(
    products: Iterable[Product],
    search: str = "",
    day: date | None = None,
    tz: ZoneInfo | None = None,
) -> list[Product]:
    """Products whose name contains *search* and, if given, created on *day*."""
    tz = tz or ZoneInfo("UTC")
    needle = search.lower()
    return [
        p
        for p in products
        if needle in p.name.lower()
        and (day is None or _local_day(p.created_at, tz) == day)
    ]


def sale_matches(sale: Sale, search: str) -> bool:
    """Match on customer name, phone number or any product name."""
    needle = search.lower()
    if needle in sale.username.lower():
        return True
    if search in sale.phone_number:
        return True
    return any(needle in line.product_name.lower() for line in sale.products)


def filter_sales(
    sales: Iterable[Sale],
    search: str = "",
    day: date | None = None,
    tz: ZoneInfo | None = None,
) -> list[Sale]:
    """Sales matching *search* and, if given, recorded on *day*."""
    tz = tz or ZoneInfo("UTC")
    return [
        s
        for s in sales
        if sale_matches(s, search)
        and (day is None or _local_day(s.timestamp, tz) == day)
    ]
