"""Tests for the sale pricing engine."""

from decimal import Decimal

import pytest

from shopdesk.core.exceptions import InvalidLineError, ValidationError
from shopdesk.core.services.pricing import (
    LineInput,
    format_money,
    line_display_price,
    price_lines,
    price_sale,
    to_money,
)


def _lines(*prices: str) -> list[LineInput]:
    return [LineInput(Decimal(p)) for p in prices]


class TestLineDisplayPrice:
    def test_face_price_without_discount(self):
        assert line_display_price(LineInput(Decimal("200"))) == Decimal("200")

    def test_discount_price_when_present(self):
        line = LineInput(Decimal("200"), Decimal("180"))
        assert line_display_price(line) == Decimal("180")

    def test_zero_discount_price_is_valid(self):
        assert line_display_price(LineInput(Decimal("200"), Decimal("0"))) == Decimal("0")

    @pytest.mark.parametrize("discount_price", ["-0.01", "200.01"])
    def test_out_of_range_raises(self, discount_price):
        with pytest.raises(InvalidLineError) as exc_info:
            line_display_price(LineInput(Decimal("200"), Decimal(discount_price)), index=3)
        assert exc_info.value.details["index"] == 3


class TestPriceLines:
    def test_flat_discount_example(self):
        pricing = price_lines(_lines("100", "250"), Decimal("50"))
        shown = pricing.display()
        assert shown["raw_subtotal"] == "350.00"
        assert shown["final_total"] == "300.00"
        assert shown["total_discount"] == "50.00"

    def test_line_discount_example(self):
        pricing = price_lines([LineInput(Decimal("200"), Decimal("180"))], Decimal("0"))
        shown = pricing.display()
        assert shown["net_subtotal"] == "180.00"
        assert shown["final_total"] == "180.00"
        assert shown["raw_subtotal"] == "200.00"
        assert shown["per_line_discount_total"] == "20.00"

    @pytest.mark.parametrize(
        ("prices", "discount"),
        [
            (["100"], "0"),
            (["19.99", "5.01", "75"], "100"),
            (["0.10", "0.20", "0.30"], "0.15"),
            (["999.99"] * 7, "1234.56"),
        ],
    )
    def test_flat_discount_without_line_discounts(self, prices, discount):
        pricing = price_lines(_lines(*prices), Decimal(discount))
        total = sum((Decimal(p) for p in prices), Decimal(0))
        assert pricing.final_total == total - Decimal(discount)
        assert pricing.total_discount == Decimal(discount)

    def test_line_discount_reduces_net_subtotal_exactly(self):
        plain = price_lines(_lines("300", "120"))
        discounted = price_lines(
            [LineInput(Decimal("300"), Decimal("275.5")), LineInput(Decimal("120"))]
        )
        assert plain.net_subtotal - discounted.net_subtotal == Decimal("24.5")
        assert discounted.raw_subtotal - discounted.net_subtotal == Decimal("24.5")

    def test_totals_reconcile(self):
        pricing = price_lines(
            [
                LineInput(Decimal("300"), Decimal("250")),
                LineInput(Decimal("99.99")),
                LineInput(Decimal("45.5"), Decimal("40")),
            ],
            Decimal("20"),
        )
        assert (
            pricing.raw_subtotal - pricing.net_subtotal + pricing.discount
            == pricing.raw_subtotal - pricing.final_total
            == pricing.total_discount
        )

    def test_negative_discount_raises(self):
        with pytest.raises(ValidationError, match="discount cannot be negative"):
            price_lines(_lines("100"), Decimal("-1"))

    def test_no_intermediate_rounding(self):
        pricing = price_lines(_lines("0.005", "0.005", "0.005"))
        assert pricing.raw_subtotal == Decimal("0.015")
        assert pricing.display()["raw_subtotal"] == "0.02"

    def test_line_display_text(self):
        pricing = price_lines([LineInput(Decimal("200"), Decimal("180")), LineInput(Decimal("200"))])
        assert pricing.lines[0].display_text == "180.00 (Discounted)"
        assert pricing.lines[0].is_discounted
        assert pricing.lines[0].line_discount == Decimal("20")
        assert pricing.lines[1].display_text == "200.00"
        assert not pricing.lines[1].is_discounted

    def test_invalid_line_reports_position(self):
        with pytest.raises(InvalidLineError) as exc_info:
            price_lines([LineInput(Decimal("10")), LineInput(Decimal("10"), Decimal("11"))])
        assert exc_info.value.details["index"] == 1


class TestPriceSale:
    def test_matches_price_lines(self, sample_sale):
        pricing = price_sale(sample_sale)
        assert pricing.display() == {
            "raw_subtotal": "350.00",
            "net_subtotal": "350.00",
            "per_line_discount_total": "0.00",
            "discount": "50.00",
            "final_total": "300.00",
            "total_discount": "50.00",
        }

    def test_idempotent(self, sample_sale):
        assert price_sale(sample_sale) == price_sale(sample_sale)


class TestMoneyFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.005", "1.01"),
            ("2.675", "2.68"),
            ("-1.005", "-1.01"),
            ("10", "10.00"),
            (0.1, "0.10"),
        ],
    )
    def test_half_up(self, value, expected):
        assert format_money(value) == expected

    def test_to_money_quantizes(self):
        assert to_money("3.14159") == Decimal("3.14")
