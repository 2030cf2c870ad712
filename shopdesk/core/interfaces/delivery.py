"""Ports for invoice rendering, document storage and customer notification."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from shopdesk.core.entities.sale import Sale, SaleLineItem
from shopdesk.core.services.pricing import SalePricing

NameResolver = Callable[[SaleLineItem], str]


class IInvoiceRenderer(ABC):
    """Interface for invoice document rendering implementations."""

    @abstractmethod
    def render(
        self,
        sale: Sale,
        pricing: SalePricing,
        resolve_name: NameResolver,
    ) -> bytes:
        """Render a priced sale into document bytes."""
        ...


class IDocumentStorage(ABC):
    """Interface for storing generated documents."""

    @abstractmethod
    async def upload(self, data: bytes, path: str) -> str:
        """Store bytes at a relative path and return a public URL."""
        ...


class INotifier(ABC):
    """Interface for pushing a message with an attached document link."""

    @abstractmethod
    async def send(
        self,
        phone_number: str,
        message: str,
        media_url: str,
        filename: str,
    ) -> None:
        """Submit the message. Raises DispatchError when not accepted."""
        ...
