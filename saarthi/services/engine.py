"""
Triage engine wiring.

Builds the single owned Report Store and hands the same instance to every
consumer (ledger, submission flow, routes). Components talk to each other
only through the event bus or through the store's public methods.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from saarthi.core.settings import settings
from saarthi.models.report import Report, ReportStatus
from saarthi.services.classifier.base import ImageLabeler
from saarthi.services.classifier.classifier import ComplaintClassifier
from saarthi.services.classifier.registry import build_classifier
from saarthi.services.event_bus import SEEDED, EventBus, get_event_bus
from saarthi.services.karma import KarmaCounter
from saarthi.services.notice_board import NoticeBoard
from saarthi.services.report_store import ReportStore
from saarthi.services.state_storage import StateStorage, create_state_storage
from saarthi.services.submission_service import SubmissionService
from saarthi.services.vote_ledger import VoteLedger
from saarthi.utils.ids import generate_id

logger = logging.getLogger(__name__)

SEED_LOCATION = (12.9716, 77.5946)


class TriageEngine:
    """Holds one instance of every engine component."""

    def __init__(
        self,
        storage: StateStorage,
        bus: EventBus,
        classifier: ComplaintClassifier,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage
        self.bus = bus
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.classifier = classifier
        self.notices = NoticeBoard(storage, bus, clock=self.clock)
        self.karma = KarmaCounter(storage, bus, default=settings.DEFAULT_KARMA)
        self.store = ReportStore(
            storage,
            bus,
            self.notices,
            max_deadline_hours=settings.MAX_DEADLINE_HOURS,
            overdue_penalty=settings.OVERDUE_PRIORITY_PENALTY,
            clock=self.clock,
        )
        self.ledger = VoteLedger(storage, self.store)
        self.submissions = SubmissionService(
            classifier,
            self.store,
            self.karma,
            karma_points=settings.SUBMISSION_KARMA_POINTS,
            default_location=(settings.DEFAULT_LAT, settings.DEFAULT_LNG),
        )

    def sample_reports(self) -> List[Report]:
        now = self.clock()
        due_by = now + min(timedelta(days=2), self.store.max_horizon)
        base_lat, base_lng = SEED_LOCATION

        def sample(title, description, dlat, dlng, direction, address, tags, votes, priority, status):
            return Report(
                id=generate_id(),
                title=title,
                description=description,
                lat=base_lat + dlat,
                lng=base_lng + dlng,
                direction=direction,
                address=address,
                tags=tags,
                votes=votes,
                priority=priority,
                status=status,
                assigned_at=now,
                due_by=due_by,
                created_at=now,
            )

        return [
            sample("Sample Pothole", "Demo pothole for testing", 0.0, 0.0, "NE",
                   "Demo Street, Demo City", ["pothole", "infrastructure"], 2, 2, ReportStatus.PENDING),
            sample("Sample Broken Light", "Demo broken streetlight", 0.0004, -0.0016, "S",
                   "Demo Ave, Demo City", ["lighting", "utilities"], 1, 1, ReportStatus.PENDING),
            sample("Reported Bribery Attempt", "Resident reported an attempted bribery at the permit office.",
                   0.0014, 0.0004, "NW", "Admin Block, Demo City", ["bribery", "corruption"], 0, 5,
                   ReportStatus.PENDING),
            sample("Overflowing Drain near Market", "Sanitation issue causing smell and pests.",
                   -0.0016, 0.0014, "E", "Market Road, Demo City", ["sanitation"], 3, 3,
                   ReportStatus.IN_PROGRESS),
        ]

    def seed_demo_data(self) -> List[Report]:
        """
        Reset to demo data: four sample reports, default notices, karma.
        Publishes a single `seeded` event.
        """
        reports = self.sample_reports()
        with self.store.lock:
            self.store.replace_all(reports)
            self.notices.reset_to_defaults()
            self.karma.reset(settings.DEFAULT_KARMA)
        logger.info(f"Seeded {len(reports)} demo report(s)")
        self.bus.publish(SEEDED, {})
        return self.store.snapshot()


def build_engine(
    storage: Optional[StateStorage] = None,
    bus: Optional[EventBus] = None,
    labeler: Optional[ImageLabeler] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> TriageEngine:
    return TriageEngine(
        storage=storage or create_state_storage(),
        bus=bus or get_event_bus(),
        classifier=build_classifier(labeler),
        clock=clock,
    )


# Global engine instance (singleton pattern)
_engine: Optional[TriageEngine] = None


def get_engine() -> TriageEngine:
    """Get or create the TriageEngine singleton."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def set_engine(engine: Optional[TriageEngine]) -> None:
    """Replace the singleton (startup wiring and tests)."""
    global _engine
    _engine = engine
