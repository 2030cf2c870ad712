"""
Sale draft and pre-submission validation.

A draft moves through ``EDITING -> VALIDATING -> {REJECTED, ACCEPTED}``.
Checks run in a fixed order and stop at the first failure. An accepted draft
is frozen and hands out an immutable ``Sale``.
"""

import re
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from shopdesk.config import get_logger
from shopdesk.core.entities.product import Product
from shopdesk.core.entities.sale import PaymentMethod, Sale, SaleLineItem
from shopdesk.core.exceptions import DraftFrozenError, ValidationError
from shopdesk.core.services.pricing import (
    ZERO,
    SalePricing,
    as_decimal,
    line_display_price,
    price_lines,
)

logger = get_logger(__name__)

PHONE_RE = re.compile(r"[0-9]{10,15}")


class DraftState(str, Enum):
    """Where a sale draft is in its lifecycle."""

    EDITING = "editing"
    VALIDATING = "validating"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class DraftLine:
    """A line as typed on the sale form."""

    product_name: str = ""
    product_id: str = ""  # empty until a catalog product is picked
    price: Decimal = ZERO
    discount_price: Decimal | None = None


class SaleDraft:
    """Mutable sale form state with a validation gate."""

    def __init__(
        self,
        username: str = "",
        phone_number: str = "",
        payment_method: PaymentMethod | None = PaymentMethod.CASH,
        lines: Iterable[DraftLine] | None = None,
        discount: Decimal = ZERO,
    ) -> None:
        self._username = username
        self._phone_number = phone_number
        self._payment_method = payment_method
        self._lines: list[DraftLine] = list(lines) if lines is not None else [DraftLine()]
        self._discount = as_decimal(discount)
        self._state = DraftState.EDITING
        self._last_error: ValidationError | None = None
        self._sale: Sale | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def last_error(self) -> ValidationError | None:
        return self._last_error

    @property
    def sale(self) -> Sale | None:
        """The accepted sale, once submitted successfully."""
        return self._sale

    @property
    def lines(self) -> tuple[DraftLine, ...]:
        return tuple(self._lines)

    @property
    def discount(self) -> Decimal:
        return self._discount

    def _edit(self) -> None:
        if self._state is DraftState.ACCEPTED:
            raise DraftFrozenError()
        if self._state is DraftState.REJECTED:
            self._state = DraftState.EDITING
            self._last_error = None

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_customer(
        self,
        username: str | None = None,
        phone_number: str | None = None,
    ) -> None:
        self._edit()
        if username is not None:
            self._username = username
        if phone_number is not None:
            self._phone_number = phone_number

    def set_payment_method(self, method: PaymentMethod | None) -> None:
        self._edit()
        self._payment_method = method

    def set_discount(self, discount: Decimal) -> None:
        self._edit()
        self._discount = as_decimal(discount)

    def add_line(self, line: DraftLine | None = None) -> int:
        """Append a line and return its index."""
        self._edit()
        self._lines.append(line or DraftLine())
        return len(self._lines) - 1

    def remove_line(self, index: int) -> None:
        self._edit()
        del self._lines[index]

    def type_product_name(self, index: int, name: str) -> None:
        """Typing a name drops any previously selected product."""
        self._edit()
        self._lines[index] = replace(
            self._lines[index], product_name=name, product_id="", price=ZERO
        )

    def select_product(self, index: int, product: Product) -> None:
        """Pick a catalog product for a line, copying its name and price."""
        self._edit()
        self._lines[index] = replace(
            self._lines[index],
            product_name=product.name,
            product_id=product.id or "",
            price=product.price,
        )

    def set_line_price(
        self,
        index: int,
        price: Decimal,
        discount_price: Decimal | None = None,
    ) -> None:
        self._edit()
        self._lines[index] = replace(
            self._lines[index],
            price=as_decimal(price),
            discount_price=as_decimal(discount_price) if discount_price is not None else None,
        )

    def preview(self) -> SalePricing:
        """Price the current lines. Raises InvalidLineError on bad lines."""
        return price_lines(self._lines, max(self._discount, ZERO))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def submit(
        self,
        catalog: Mapping[str, Product] | Iterable[Product],
        now: datetime | None = None,
        sale_id: str | None = None,
    ) -> Sale:
        """
        Validate the draft and freeze it into a Sale.

        Raises:
            ValidationError: On the first failed check; the draft is REJECTED.
            DraftFrozenError: If the draft was already accepted.
        """
        if self._state is DraftState.ACCEPTED:
            raise DraftFrozenError()

        if not isinstance(catalog, Mapping):
            catalog = {p.id: p for p in catalog if p.id}

        self._state = DraftState.VALIDATING
        try:
            sale = self._validate(catalog, now or datetime.now(UTC), sale_id)
        except ValidationError as e:
            self._state = DraftState.REJECTED
            self._last_error = e
            logger.info(
                "sale_draft_rejected",
                field=e.details.get("field"),
                reason=e.details.get("message"),
            )
            raise

        self._state = DraftState.ACCEPTED
        self._sale = sale
        return sale

    def _validate(
        self,
        catalog: Mapping[str, Product],
        now: datetime,
        sale_id: str | None,
    ) -> Sale:
        username = self._username.strip()
        if not username:
            raise ValidationError("username", "username is required")

        phone = self._phone_number.strip()
        if not phone:
            raise ValidationError("phone_number", "phone number is required")
        if not PHONE_RE.fullmatch(phone):
            raise ValidationError(
                "phone_number", "phone number must be 10 to 15 digits", phone
            )

        if self._payment_method is None:
            raise ValidationError("payment_method", "payment method is required")

        if not self._lines:
            raise ValidationError("products", "at least one product is required")

        items: list[SaleLineItem] = []
        for i, line in enumerate(self._lines):
            field = f"products[{i}]"
            if not line.product_name.strip():
                raise ValidationError(
                    f"{field}.product_name",
                    f"product name is required for item {i + 1}",
                )
            product = catalog.get(line.product_id) if line.product_id else None
            if product is None:
                raise ValidationError(
                    f"{field}.product_id",
                    f"select a catalog product for item {i + 1}",
                    line.product_id or None,
                )
            if line.price <= ZERO:
                raise ValidationError(
                    f"{field}.price",
                    f"price must be greater than zero for item {i + 1}",
                    line.price,
                )
            # raises InvalidLineError for a discount price outside [0, price]
            line_display_price(line, i)
            items.append(
                SaleLineItem(
                    product_id=line.product_id,
                    product_name=line.product_name.strip(),
                    price=line.price,
                    discount_price=line.discount_price,
                    warranty=product.warranty,
                )
            )

        pricing = price_lines(items, ZERO)
        if self._discount < ZERO:
            raise ValidationError("discount", "discount cannot be negative", self._discount)
        if self._discount > pricing.raw_subtotal:
            raise ValidationError("discount", "discount exceeds subtotal", self._discount)
        if self._discount > pricing.net_subtotal:
            raise ValidationError(
                "discount", "discount exceeds discounted subtotal", self._discount
            )

        return Sale(
            id=sale_id or uuid.uuid4().hex,
            username=username,
            phone_number=phone,
            payment_method=self._payment_method,
            products=tuple(items),
            discount=self._discount,
            timestamp=now,
        )
