"""
Pytest configuration and fixtures
"""
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from saarthi.services.event_bus import EventBus
from saarthi.services.state_storage import MemoryStateBackend, StateStorage


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingSubscriber:
    """Collects every (event, payload) pair published on a bus."""

    def __init__(self):
        self.events = []

    def __call__(self, event_name, payload):
        self.events.append((event_name, payload))

    def named(self, event_name):
        return [p for name, p in self.events if name == event_name]


@pytest.fixture
def clock():
    """Clock frozen at a fixed instant."""
    return FrozenClock(datetime(2026, 1, 27, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage():
    """In-memory state storage."""
    return StateStorage(MemoryStateBackend())


@pytest.fixture
def bus():
    """Fresh event bus (never the process-wide singleton)."""
    return EventBus()


@pytest.fixture
def recorder(bus):
    """Subscriber recording every event on the `bus` fixture."""
    subscriber = RecordingSubscriber()
    bus.subscribe_all(subscriber)
    return subscriber


@pytest.fixture
def engine(storage, bus, clock):
    """Engine wired to memory storage, a fresh bus and a frozen clock."""
    from saarthi.services.classifier.noop_labeler import NoOpImageLabeler
    from saarthi.services.engine import build_engine

    return build_engine(storage=storage, bus=bus, labeler=NoOpImageLabeler(), clock=clock)


@pytest.fixture
def observer():
    """Viewer position used by the ranking scenarios."""
    return (12.9716, 77.5946)
