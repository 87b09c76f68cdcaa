"""
Change Notification Bus - process-wide publish/subscribe for store mutations.

Delivery is synchronous and in-process only: no persistence, no replay, no
acknowledgement. A failing subscriber is logged and skipped so publishers are
never interrupted.
"""

import itertools
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Stable event names
REPORT_ADDED = "report-added"
VOTE = "vote"
OVERDUE_CHECKED = "overdue-checked"
SEEDED = "seeded"
NOTICE_ADDED = "notice-added"
KARMA = "karma"
STATUS_CHANGED = "status-changed"

Handler = Callable[[str, Dict[str, Any]], None]
Unsubscribe = Callable[[], None]

_ALL = "*"


class EventBus:
    """Typed publish/subscribe interface used by every store-owning component."""

    def __init__(self):
        self._subscriptions: List[Tuple[int, str, Handler]] = []
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, handler: Handler) -> Unsubscribe:
        """
        Register `handler` for `event_name`.

        Returns:
            A callable that removes the subscription (safe to call twice)
        """
        with self._lock:
            token = next(self._tokens)
            self._subscriptions.append((token, event_name, handler))

        def unsubscribe() -> None:
            with self._lock:
                self._subscriptions = [s for s in self._subscriptions if s[0] != token]

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Unsubscribe:
        """Register `handler` for every event."""
        return self.subscribe(_ALL, handler)

    def publish(self, event_name: str, payload: Optional[Dict[str, Any]] = None) -> int:
        """
        Deliver an event to matching subscribers.

        Returns:
            Number of handlers that ran without raising
        """
        payload = payload or {}
        with self._lock:
            targets = [h for _, name, h in self._subscriptions if name in (event_name, _ALL)]

        delivered = 0
        for handler in targets:
            try:
                handler(event_name, payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"Subscriber {getattr(handler, '__name__', handler)!r} failed on '{event_name}': {e}")
        logger.debug(f"Published '{event_name}' to {delivered}/{len(targets)} subscriber(s)")
        return delivered

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)


# Global bus instance (singleton pattern)
_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get or create the process-wide EventBus."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
