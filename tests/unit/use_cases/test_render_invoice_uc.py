"""Tests for RenderInvoiceUseCase."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shopdesk.application.use_cases import RenderInvoiceUseCase
from shopdesk.core.exceptions import RenderError, SaleNotFoundError


class TestRenderInvoiceUseCase:
    async def test_execute_success(
        self,
        mock_sales_store: AsyncMock,
        mock_catalog_store: AsyncMock,
        mock_renderer: MagicMock,
    ):
        use_case = RenderInvoiceUseCase(
            sales_store=mock_sales_store,
            catalog_store=mock_catalog_store,
            renderer=mock_renderer,
            timezone="UTC",
        )

        result = await use_case.execute("sale-1")

        assert result.sale_id == "sale-1"
        assert result.pdf_bytes == b"%PDF-1.4 mock pdf content"
        assert result.file_size == len(b"%PDF-1.4 mock pdf content")
        assert result.filename == "Invoice_05-03-2024_sale-1.pdf"
        mock_renderer.render.assert_called_once()

    async def test_sale_not_found(
        self,
        mock_sales_store: AsyncMock,
        mock_catalog_store: AsyncMock,
        mock_renderer: MagicMock,
    ):
        mock_sales_store.get_sale.return_value = None
        use_case = RenderInvoiceUseCase(
            sales_store=mock_sales_store,
            catalog_store=mock_catalog_store,
            renderer=mock_renderer,
        )

        with pytest.raises(SaleNotFoundError):
            await use_case.execute("missing")

        mock_renderer.render.assert_not_called()

    async def test_render_error_propagates(
        self,
        mock_sales_store: AsyncMock,
        mock_catalog_store: AsyncMock,
        mock_renderer: MagicMock,
    ):
        mock_renderer.render.side_effect = RenderError("sale-1", "broken")
        use_case = RenderInvoiceUseCase(
            sales_store=mock_sales_store,
            catalog_store=mock_catalog_store,
            renderer=mock_renderer,
        )

        with pytest.raises(RenderError):
            await use_case.execute("sale-1")
