"""Abstract interface for catalog storage."""

from abc import ABC, abstractmethod

from shopdesk.core.entities.product import Product
from shopdesk.core.interfaces.change_feed import ChangeListener, Subscription


class ICatalogStore(ABC):
    """Interface for product catalog persistence."""

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """List all products, newest first."""
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Persist a product and return it with its assigned ID."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: str) -> bool:
        """Delete a product. Returns False if it did not exist."""
        pass

    @abstractmethod
    def subscribe(self, on_change: ChangeListener) -> Subscription:
        """Register a listener for committed catalog writes."""
        pass
