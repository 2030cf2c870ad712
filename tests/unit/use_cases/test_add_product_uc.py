"""Tests for AddProductUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from shopdesk.application.dto.requests import CreateProductRequest
from shopdesk.application.use_cases import AddProductUseCase
from shopdesk.core.exceptions import ValidationError


class TestAddProductUseCase:
    async def test_execute_success(self, mock_catalog_store: AsyncMock):
        use_case = AddProductUseCase(catalog_store=mock_catalog_store)

        result = await use_case.execute(
            CreateProductRequest(name="  Earphones ", price=Decimal("349.50"))
        )

        assert result.product.id == "p-new"
        assert result.product.name == "Earphones"
        assert result.product.warranty is None
        mock_catalog_store.create_product.assert_awaited_once()

    async def test_warranty_product(self, mock_catalog_store: AsyncMock):
        use_case = AddProductUseCase(catalog_store=mock_catalog_store)

        result = await use_case.execute(
            CreateProductRequest(
                name="Power Bank", price=Decimal("1200"), has_warranty=True, warranty_months=12
            )
        )

        response = use_case.to_response(result)
        assert response.has_warranty is True
        assert response.warranty_months == 12
        assert response.warranty == "12 months"
        assert response.price == "1200.00"

    @pytest.mark.parametrize(
        ("request_kwargs", "field"),
        [
            ({"name": "", "price": Decimal("0")}, "name"),
            ({"name": "   ", "price": Decimal("10")}, "name"),
            ({"name": "Cable", "price": Decimal("0")}, "price"),
            ({"name": "Cable", "price": Decimal("-5")}, "price"),
            ({"name": "Cable", "price": Decimal("10"), "has_warranty": True}, "warranty_months"),
        ],
    )
    async def test_rejects_invalid_form(
        self, mock_catalog_store: AsyncMock, request_kwargs: dict, field: str
    ):
        use_case = AddProductUseCase(catalog_store=mock_catalog_store)

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute(CreateProductRequest(**request_kwargs))

        assert exc_info.value.details["field"] == field
        mock_catalog_store.create_product.assert_not_called()

    def test_months_ignored_without_warranty(self):
        product = AddProductUseCase.build_product(
            CreateProductRequest(name="Cable", price=Decimal("10"), warranty_months=6)
        )

        assert product.warranty is None
