"""Abstract interface for sale record storage."""

from abc import ABC, abstractmethod

from shopdesk.core.entities.sale import InvoiceStatus, NotificationStatus, Sale
from shopdesk.core.interfaces.change_feed import ChangeListener, Subscription


class ISalesStore(ABC):
    """Interface for sale record persistence."""

    @abstractmethod
    async def list_sales(self) -> list[Sale]:
        """List all sales, newest first."""
        pass

    @abstractmethod
    async def get_sale(self, sale_id: str) -> Sale | None:
        """Get a sale with its lines."""
        pass

    @abstractmethod
    async def create_sale(self, sale: Sale) -> Sale:
        """Persist a sale with all its lines atomically."""
        pass

    @abstractmethod
    async def delete_sale(self, sale_id: str) -> bool:
        """Delete a sale. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def update_invoice(
        self,
        sale_id: str,
        status: InvoiceStatus,
        invoice_url: str | None = None,
        error: str | None = None,
    ) -> Sale:
        """Record the outcome of invoice generation and upload."""
        pass

    @abstractmethod
    async def update_notification(
        self,
        sale_id: str,
        status: NotificationStatus,
        error: str | None = None,
    ) -> Sale:
        """Record the outcome of customer notification."""
        pass

    @abstractmethod
    def subscribe(self, on_change: ChangeListener) -> Subscription:
        """Register a listener for committed sale writes."""
        pass
