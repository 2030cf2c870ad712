"""Tests for catalog product entities."""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from shopdesk.core.entities import Product, Warranty, warranty_text


class TestWarranty:
    def test_text_with_warranty(self):
        assert Warranty(has_warranty=True, months=12).text == "12 months"

    def test_text_without_warranty(self):
        assert Warranty(has_warranty=False, months=12).text == "N/A"

    def test_negative_months_rejected(self):
        with pytest.raises(PydanticValidationError):
            Warranty(has_warranty=True, months=-1)

    def test_warranty_text_for_missing(self):
        assert warranty_text(None) == "N/A"
        assert warranty_text(Warranty(has_warranty=True, months=3)) == "3 months"


class TestProduct:
    def test_defaults(self):
        product = Product(name="Cable", price=Decimal("99.5"))
        assert product.id is None
        assert product.warranty is None
        assert isinstance(product.created_at, datetime)
        assert product.created_at.tzinfo is not None

    def test_negative_price_rejected(self):
        with pytest.raises(PydanticValidationError):
            Product(name="Cable", price=Decimal("-1"))

    def test_frozen(self):
        product = Product(name="Cable", price=Decimal("1"))
        with pytest.raises(PydanticValidationError):
            product.name = "Other"
