"""
Sale invoice PDF renderer using fpdf2.

Lays out an A4 invoice with an optional letterhead image, shop header,
customer block, itemized table and totals, plus a page-numbered footer.
Every amount printed comes from the ``SalePricing`` handed in.
"""

import os
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from shopdesk.config import get_logger
from shopdesk.config.settings import PdfSettings, get_settings, shop_timezone
from shopdesk.core.entities.product import Product, warranty_text
from shopdesk.core.entities.sale import Sale, SaleLineItem
from shopdesk.core.exceptions import RenderError
from shopdesk.core.interfaces.delivery import IInvoiceRenderer, NameResolver
from shopdesk.core.services.pricing import SalePricing, format_money

logger = get_logger(__name__)

UNKNOWN_PRODUCT = "Unknown Product"
INVOICE_DIR = "invoices"
UNICODE_FAMILY = "InvoiceUnicode"
FALLBACK_FAMILY = "Helvetica"


def _local(moment: datetime, tz: ZoneInfo) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz)


def invoice_filename(sale: Sale, tz: ZoneInfo | None = None) -> str:
    """File name of a sale's invoice, e.g. ``Invoice_05-03-2024_ab12.pdf``."""
    day = _local(sale.timestamp, tz or ZoneInfo("UTC")).strftime("%d-%m-%Y")
    return f"Invoice_{day}_{sale.id}.pdf"


def invoice_path(sale: Sale, tz: ZoneInfo | None = None) -> str:
    """Relative storage path of a sale's invoice."""
    return f"{INVOICE_DIR}/{invoice_filename(sale, tz)}"


class CatalogNameResolver:
    """Resolves line names by product id against a catalog snapshot."""

    def __init__(self, catalog: Mapping[str, Product] | Iterable[Product]):
        if isinstance(catalog, Mapping):
            self._names = {pid: p.name for pid, p in catalog.items()}
        else:
            self._names = {p.id: p.name for p in catalog if p.id}

    def __call__(self, line: SaleLineItem) -> str:
        return self._names.get(line.product_id, UNKNOWN_PRODUCT)


def _safe_text(text: str) -> str:
    """Replace characters the built-in Helvetica font cannot encode."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


class _InvoicePdf(FPDF):
    """
    FPDF subclass that renders a footer on every page.

    Loads the configured Unicode TTF under every style the invoice uses.
    Without one, text is narrowed to Latin-1 for the built-in Helvetica.
    """

    def __init__(self, pdf_settings: PdfSettings) -> None:
        super().__init__(format="A4")
        self._pdf_settings = pdf_settings
        self._family = self._load_unicode_font(pdf_settings.unicode_font_path)

    @property
    def unicode_font_loaded(self) -> bool:
        return self._family == UNICODE_FAMILY

    def _load_unicode_font(self, font_path: str) -> str:
        if not font_path:
            return FALLBACK_FAMILY
        if not os.path.isfile(font_path):
            logger.warning("invoice_font_missing", path=font_path)
            return FALLBACK_FAMILY
        try:
            for style in ("", "B", "I"):
                self.add_font(UNICODE_FAMILY, style, font_path)
        except Exception as e:
            logger.warning("invoice_font_unusable", path=font_path, error=str(e))
            return FALLBACK_FAMILY
        return UNICODE_FAMILY

    def use_font(self, style: str = "", size: float = 10) -> None:
        self.set_font(self._family, style, size)

    def printable(self, text: str) -> str:
        """Text as the active font family can encode it."""
        if self.unicode_font_loaded:
            return text
        return _safe_text(text)

    def footer(self) -> None:
        """Render footer with page numbers."""
        self.set_y(-15)
        self.use_font("I", 8)
        self.cell(0, 5, self.printable(self._pdf_settings.footer_text), align="L")
        self.set_x(-40)
        self.cell(0, 5, f"Page {self.page_no()} of {{nb}}", align="R")


class Fpdf2InvoiceRenderer(IInvoiceRenderer):
    """Renders sale invoices using fpdf2."""

    def __init__(
        self,
        pdf_settings: PdfSettings | None = None,
        timezone: str | None = None,
    ) -> None:
        settings = get_settings()
        self._settings = pdf_settings or settings.pdf
        self._tz = shop_timezone(timezone)

    def render(
        self,
        sale: Sale,
        pricing: SalePricing,
        resolve_name: NameResolver,
    ) -> bytes:
        """Render a priced sale into PDF bytes."""
        try:
            pdf = _InvoicePdf(self._settings)
            pdf.alias_nb_pages()
            pdf.set_auto_page_break(auto=True, margin=20)
            pdf.add_page()

            self._render_header(pdf)
            self._render_separator(pdf)
            self._render_customer(pdf, sale)
            self._render_items_table(pdf, sale, pricing, resolve_name)
            self._render_totals(pdf, pricing)
            self._render_thank_you(pdf)

            data = bytes(pdf.output())
        except Exception as e:
            logger.error("invoice_render_failed", sale_id=sale.id, error=str(e))
            raise RenderError(sale.id, str(e)) from e

        logger.info(
            "invoice_rendered",
            sale_id=sale.id,
            size=len(data),
            unicode_font=pdf.unicode_font_loaded,
        )
        return data

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_header(self, pdf: _InvoicePdf) -> None:
        """Letterhead image when configured, then the shop block and title."""
        letterhead = self._settings.letterhead_path
        if letterhead and os.path.isfile(letterhead):
            pdf.image(letterhead, x=10, y=10, w=190)
            pdf.ln(4)
        else:
            pdf.use_font("B", 16)
            pdf.cell(
                0, 8, pdf.printable(self._settings.shop_name), align="C",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
            pdf.use_font("", 9)
            if self._settings.shop_address:
                pdf.cell(
                    0, 5, pdf.printable(self._settings.shop_address), align="C",
                    new_x=XPos.LMARGIN, new_y=YPos.NEXT,
                )
            if self._settings.shop_phone:
                pdf.cell(
                    0, 5, pdf.printable(f"Tel: {self._settings.shop_phone}"), align="C",
                    new_x=XPos.LMARGIN, new_y=YPos.NEXT,
                )

        pdf.ln(3)
        pdf.use_font("B", 18)
        pdf.cell(
            0, 12, "INVOICE", align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(2)

    @staticmethod
    def _render_separator(pdf: FPDF) -> None:
        y = pdf.get_y()
        pdf.set_draw_color(100, 100, 100)
        pdf.line(10, y, 200, y)
        pdf.set_draw_color(0, 0, 0)
        pdf.ln(4)

    def _render_customer(self, pdf: _InvoicePdf, sale: Sale) -> None:
        issued = _local(sale.timestamp, self._tz).strftime("%d-%m-%Y %H:%M")
        rows = [
            ("Customer", sale.username),
            ("Phone", sale.phone_number),
            ("Date", issued),
            ("Payment", sale.payment_method.value),
        ]
        for label, value in rows:
            pdf.use_font("B", 10)
            pdf.cell(30, 6, f"{label}:")
            pdf.use_font("", 10)
            pdf.cell(
                0, 6, pdf.printable(value),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.ln(4)

    def _render_items_table(
        self,
        pdf: _InvoicePdf,
        sale: Sale,
        pricing: SalePricing,
        resolve_name: NameResolver,
    ) -> None:
        """Items table with alternating row shading."""
        col_widths = [12, 98, 40, 40]
        headers = ["#", "Product", f"Price ({self._settings.currency_label})", "Warranty"]

        pdf.use_font("B", 9)
        pdf.set_fill_color(70, 70, 70)
        pdf.set_text_color(255, 255, 255)
        for width, header in zip(col_widths, headers):
            pdf.cell(width, 7, pdf.printable(header), border=1, fill=True, align="C")
        pdf.ln()
        pdf.set_text_color(0, 0, 0)

        pdf.use_font("", 9)
        for line, priced in zip(sale.products, pricing.lines):
            fill = priced.index % 2 == 1
            if fill:
                pdf.set_fill_color(240, 240, 240)

            name = pdf.printable(resolve_name(line))[:55]
            pdf.cell(col_widths[0], 6, str(priced.index + 1), border=1, align="C", fill=fill)
            pdf.cell(col_widths[1], 6, name, border=1, fill=fill)
            pdf.cell(
                col_widths[2], 6, format_money(priced.display_price),
                border=1, align="R", fill=fill,
            )
            pdf.cell(
                col_widths[3], 6, warranty_text(line.warranty),
                border=1, align="C", fill=fill,
            )
            pdf.ln()

        pdf.ln(4)

    def _render_totals(self, pdf: _InvoicePdf, pricing: SalePricing) -> None:
        currency = pdf.printable(self._settings.currency_label)
        rows: list[tuple[str, str]] = [("Subtotal", format_money(pricing.raw_subtotal))]
        if pricing.per_line_discount_total:
            rows.append(
                ("Item Discounts", f"-{format_money(pricing.per_line_discount_total)}")
            )
        if pricing.discount:
            rows.append(("Discount", f"-{format_money(pricing.discount)}"))

        pdf.use_font("", 10)
        for label, amount in rows:
            pdf.cell(140, 6, f"{label}:", align="R")
            pdf.cell(
                0, 6, f"{currency} {amount}", align="R",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )

        pdf.use_font("B", 12)
        pdf.cell(140, 8, "Total:", align="R")
        pdf.cell(
            0, 8, f"{currency} {format_money(pricing.final_total)}", align="R",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(6)

    def _render_thank_you(self, pdf: _InvoicePdf) -> None:
        if not self._settings.thank_you_text:
            return
        pdf.use_font("I", 11)
        pdf.cell(
            0, 8, pdf.printable(self._settings.thank_you_text), align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
