"""Change notifications published by the stores."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import TracebackType


class ChangeKind(str, Enum):
    """What happened to a record."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """A committed write on a store collection."""

    collection: str  # "products" or "sales"
    kind: ChangeKind
    entity_id: str


ChangeListener = Callable[[ChangeEvent], None]


class Subscription:
    """
    Handle for a registered change listener.

    Releasing is explicit: call close() or use the handle as a context
    manager so the listener lives exactly as long as its consumer.
    """

    def __init__(self, release: Callable[[], None]) -> None:
        self._release = release
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Unregister the listener. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
