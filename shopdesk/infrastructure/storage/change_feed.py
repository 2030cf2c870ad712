"""
In-process change feed.

Each store owns one feed and publishes after every committed write.
Listeners run synchronously in the publishing task; a failing listener is
logged and does not affect the write or the other listeners.
"""

import itertools

from shopdesk.config import get_logger
from shopdesk.core.interfaces.change_feed import (
    ChangeEvent,
    ChangeKind,
    ChangeListener,
    Subscription,
)

logger = get_logger(__name__)


class ChangeFeed:
    """Fan-out of store change events to registered listeners."""

    def __init__(self, collection: str) -> None:
        self.collection = collection
        self._listeners: dict[int, ChangeListener] = {}
        self._ids = itertools.count(1)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, on_change: ChangeListener) -> Subscription:
        """Register *on_change* and return the handle that releases it."""
        token = next(self._ids)
        self._listeners[token] = on_change
        logger.debug("change_listener_added", collection=self.collection, token=token)

        def release() -> None:
            self._listeners.pop(token, None)
            logger.debug(
                "change_listener_removed", collection=self.collection, token=token
            )

        return Subscription(release)

    def publish(self, kind: ChangeKind, entity_id: str) -> ChangeEvent:
        """Deliver an event to every current listener."""
        event = ChangeEvent(collection=self.collection, kind=kind, entity_id=entity_id)
        for token, listener in list(self._listeners.items()):
            try:
                listener(event)
            except Exception as e:
                logger.warning(
                    "change_listener_failed",
                    collection=self.collection,
                    token=token,
                    error=str(e),
                )
        return event
