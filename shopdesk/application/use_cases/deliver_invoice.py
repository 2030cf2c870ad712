"""
Deliver Invoice Use Case.

Renders and uploads the invoice of a persisted sale, then sends its link to
the customer. Each step records its outcome on the sale instead of raising,
so a failed delivery stays visible and can be retried.
"""

from dataclasses import dataclass

from shopdesk.application.dto.responses import DeliveryResponse
from shopdesk.config import get_logger, get_settings, sale_context, shop_timezone
from shopdesk.core.entities.sale import InvoiceStatus, NotificationStatus, Sale
from shopdesk.core.exceptions import (
    DispatchError,
    InvoiceError,
    PersistenceError,
    SaleNotFoundError,
)
from shopdesk.core.interfaces.catalog_store import ICatalogStore
from shopdesk.core.interfaces.delivery import IDocumentStorage, IInvoiceRenderer, INotifier
from shopdesk.core.interfaces.sales_store import ISalesStore
from shopdesk.core.services.pricing import price_sale
from shopdesk.infrastructure.pdf.invoice_renderer import (
    CatalogNameResolver,
    Fpdf2InvoiceRenderer,
    invoice_filename,
    invoice_path,
)

logger = get_logger(__name__)


@dataclass
class DeliveryResult:
    """State of a sale after a delivery attempt."""

    sale: Sale

    @property
    def invoice_uploaded(self) -> bool:
        return self.sale.invoice_status is InvoiceStatus.UPLOADED

    @property
    def notification_sent(self) -> bool:
        return self.sale.notification_status is NotificationStatus.SENT


class DeliverInvoiceUseCase:
    """
    Use case for delivering a sale's invoice.

    Flow:
    1. Render and upload the invoice unless it is already uploaded
    2. Send the invoice link unless it was already sent
       (skipped when there is no invoice URL)

    Safe to run again after a partial failure.
    """

    def __init__(
        self,
        sales_store: ISalesStore | None = None,
        catalog_store: ICatalogStore | None = None,
        renderer: IInvoiceRenderer | None = None,
        document_storage: IDocumentStorage | None = None,
        notifier: INotifier | None = None,
        message_template: str | None = None,
        timezone: str | None = None,
    ):
        settings = get_settings()
        self._sales_store = sales_store
        self._catalog_store = catalog_store
        self._renderer = renderer or Fpdf2InvoiceRenderer()
        self._document_storage = document_storage
        self._notifier = notifier
        self._message_template = message_template or settings.notify.message_template
        self._tz = shop_timezone(timezone)

    async def _get_sales_store(self) -> ISalesStore:
        if self._sales_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_sales_store

            self._sales_store = await get_sales_store()
        return self._sales_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from shopdesk.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    def _get_document_storage(self) -> IDocumentStorage:
        if self._document_storage is None:
            from shopdesk.infrastructure.storage.files import get_document_storage

            self._document_storage = get_document_storage()
        return self._document_storage

    def _get_notifier(self) -> INotifier:
        if self._notifier is None:
            from shopdesk.infrastructure.notifications import get_notifier

            self._notifier = get_notifier()
        return self._notifier

    async def execute(self, sale: Sale | str) -> DeliveryResult:
        """
        Deliver the invoice for a sale or sale ID.

        Raises:
            SaleNotFoundError: If a sale ID does not exist.
        """
        store = await self._get_sales_store()
        if isinstance(sale, str):
            found = await store.get_sale(sale)
            if found is None:
                raise SaleNotFoundError(sale)
            sale = found

        with sale_context(sale.id):
            logger.info("invoice_delivery_started")

            if sale.invoice_status is not InvoiceStatus.UPLOADED or not sale.invoice_url:
                sale = await self._upload_invoice(store, sale)

            if sale.notification_status is not NotificationStatus.SENT:
                sale = await self._notify(store, sale)

            logger.info(
                "invoice_delivery_complete",
                invoice_status=sale.invoice_status.value,
                notification_status=sale.notification_status.value,
            )
        return DeliveryResult(sale=sale)

    async def _upload_invoice(self, store: ISalesStore, sale: Sale) -> Sale:
        try:
            catalog = await (await self._get_catalog_store()).list_products()
            data = self._renderer.render(
                sale, price_sale(sale), CatalogNameResolver(catalog)
            )
            url = await self._get_document_storage().upload(data, invoice_path(sale, self._tz))
        except (InvoiceError, PersistenceError) as e:
            logger.warning("invoice_upload_failed", error=e.message)
            return await self._record_invoice(
                store, sale, InvoiceStatus.FAILED, error=e.message
            )

        return await self._record_invoice(store, sale, InvoiceStatus.UPLOADED, url=url)

    async def _notify(self, store: ISalesStore, sale: Sale) -> Sale:
        if not sale.invoice_url:
            logger.info("notification_skipped", reason="no invoice url")
            return await self._record_notification(
                store, sale, NotificationStatus.SKIPPED, error=sale.last_error
            )

        message = self._message_template.format(username=sale.username)
        try:
            await self._get_notifier().send(
                sale.phone_number,
                message,
                sale.invoice_url,
                invoice_filename(sale, self._tz),
            )
        except DispatchError as e:
            logger.warning("notification_failed", code=e.code, error=e.message)
            return await self._record_notification(
                store, sale, NotificationStatus.FAILED, error=e.message
            )

        return await self._record_notification(store, sale, NotificationStatus.SENT)

    @staticmethod
    async def _record_invoice(
        store: ISalesStore,
        sale: Sale,
        status: InvoiceStatus,
        url: str | None = None,
        error: str | None = None,
    ) -> Sale:
        try:
            return await store.update_invoice(sale.id, status, invoice_url=url, error=error)
        except PersistenceError as e:
            logger.error("invoice_status_not_recorded", sale_id=sale.id, error=e.message)
            return sale.model_copy(
                update={
                    "invoice_status": status,
                    "invoice_url": url or sale.invoice_url,
                    "last_error": error or e.message,
                }
            )

    @staticmethod
    async def _record_notification(
        store: ISalesStore,
        sale: Sale,
        status: NotificationStatus,
        error: str | None = None,
    ) -> Sale:
        try:
            return await store.update_notification(sale.id, status, error=error)
        except PersistenceError as e:
            logger.error(
                "notification_status_not_recorded", sale_id=sale.id, error=e.message
            )
            return sale.model_copy(
                update={"notification_status": status, "last_error": error or e.message}
            )

    @staticmethod
    def to_response(result: DeliveryResult) -> DeliveryResponse:
        sale = result.sale
        return DeliveryResponse(
            sale_id=sale.id,
            invoice_status=sale.invoice_status.value,
            notification_status=sale.notification_status.value,
            invoice_url=sale.invoice_url,
            last_error=sale.last_error,
        )
