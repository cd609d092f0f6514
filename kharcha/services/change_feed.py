"""In-process change notifications for ledger collections."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

ANY_COLLECTION = "*"

ChangeCallback = Callable[[str], None]


class ChangeFeed:
    """Fan out "collection X changed" events to subscribers.

    Callbacks run on the publishing thread and must not block. Subscribers only
    learn which collection changed, never which row.
    """

    def __init__(self) -> None:
        self._subscribers: list[ChangeCallback] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: ChangeCallback) -> None:
        """Remove ``callback`` if it is registered."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def publish(self, collection: str = ANY_COLLECTION) -> None:
        """Notify every subscriber that ``collection`` changed."""
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(collection)
            except Exception:
                logger.exception("Change subscriber failed for %s", collection)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
