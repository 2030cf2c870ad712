"""Core interfaces (ports) for dependency injection."""

from shopdesk.core.interfaces.catalog_store import ICatalogStore
from shopdesk.core.interfaces.change_feed import (
    ChangeEvent,
    ChangeKind,
    ChangeListener,
    Subscription,
)
from shopdesk.core.interfaces.delivery import (
    IDocumentStorage,
    IInvoiceRenderer,
    INotifier,
    NameResolver,
)
from shopdesk.core.interfaces.sales_store import ISalesStore

__all__ = [
    # Stores
    "ICatalogStore",
    "ISalesStore",
    # Change feed
    "ChangeEvent",
    "ChangeKind",
    "ChangeListener",
    "Subscription",
    # Delivery
    "IDocumentStorage",
    "IInvoiceRenderer",
    "INotifier",
    "NameResolver",
]
