"""
Karma counter - external reward counter bumped by successful submissions.
"""

import logging
import threading
from typing import Optional

from saarthi.services.event_bus import KARMA, EventBus
from saarthi.services.state_storage import KARMA_KEY, StateStorage

logger = logging.getLogger(__name__)


class KarmaCounter:
    def __init__(self, storage: StateStorage, bus: EventBus, default: int = 10):
        self.storage = storage
        self.bus = bus
        self.default = default
        self._lock = threading.Lock()
        stored = storage.load(KARMA_KEY).value
        self._value: Optional[int] = None
        if isinstance(stored, (int, float)) and not isinstance(stored, bool):
            self._value = int(stored)
        elif stored is not None:
            logger.warning(f"Ignoring malformed stored karma value {stored!r}")

    def get(self) -> int:
        """Current karma; seeds the default on first read."""
        with self._lock:
            if self._value is None:
                self._value = self.default
                self.storage.save(KARMA_KEY, self._value)
            return self._value

    def add(self, points: int) -> int:
        with self._lock:
            if self._value is None:
                self._value = self.default
            self._value += points
            self.storage.save(KARMA_KEY, self._value)
            value = self._value
        self.bus.publish(KARMA, {"points": points, "total": value})
        return value

    def reset(self, value: int) -> None:
        with self._lock:
            self._value = value
            self.storage.save(KARMA_KEY, value)
