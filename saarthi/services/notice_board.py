"""
Notice Board - public notice list and the overdue Notice Emitter.

Overdue notices are written synchronously from inside the overdue sweep and
do not publish an event of their own; the sweep's single `overdue-checked`
event covers them.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from pydantic import ValidationError

from saarthi.models.notice import Notice, NoticePriority, NoticeType
from saarthi.models.report import Report
from saarthi.services.event_bus import NOTICE_ADDED, EventBus
from saarthi.services.state_storage import NOTICES_KEY, StateStorage
from saarthi.utils.ids import generate_id

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoticeBoard:
    """Newest-first notice list persisted under a single key."""

    def __init__(self, storage: StateStorage, bus: EventBus, clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.bus = bus
        self.clock = clock or _utcnow
        self._lock = threading.RLock()
        self._notices: List[Notice] = self._load()

    def _load(self) -> List[Notice]:
        raw = self.storage.load(NOTICES_KEY).value or []
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed stored notices of type {type(raw).__name__}")
            raw = []
        notices = []
        for item in raw:
            try:
                notices.append(Notice.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed stored notice: {e}")
        return notices

    def _persist(self) -> None:
        result = self.storage.save(NOTICES_KEY, [n.model_dump(mode="json") for n in self._notices])
        if not result.ok:
            logger.debug(f"Notices kept in memory only: {result.message}")

    def _today(self) -> str:
        return self.clock().date().isoformat()

    def default_notices(self) -> List[Notice]:
        today = self._today()
        return [
            Notice(
                id="N-2025-001",
                title="Road Repair Schedule",
                content="Road repairs scheduled for Sector 5 starting next week.",
                date=today,
                priority=NoticePriority.MEDIUM,
                type=NoticeType.UPDATE,
            ),
            Notice(
                id="N-2025-002",
                title="Water Supply Interruption",
                content="Water supply will be interrupted in zone B on Friday.",
                date=today,
                priority=NoticePriority.HIGH,
                type=NoticeType.WARNING,
            ),
        ]

    def _seed_if_empty(self) -> bool:
        """Put the default notices on an empty board. Caller holds the lock and persists."""
        if self._notices:
            return False
        self._notices = self.default_notices()
        return True

    def list(self) -> List[Notice]:
        """All notices, newest first. An empty board is seeded with the defaults."""
        with self._lock:
            if self._seed_if_empty():
                self._persist()
            return [n.model_copy() for n in self._notices]

    def add_notice(
        self,
        title: str,
        content: str,
        priority: NoticePriority = NoticePriority.MEDIUM,
        type: NoticeType = NoticeType.INFO,
    ) -> Notice:
        with self._lock:
            self._seed_if_empty()
            notice = Notice(
                id=generate_id(),
                title=title,
                content=content,
                date=self._today(),
                priority=priority,
                type=type,
            )
            self._notices.insert(0, notice)
            self._persist()
        self.bus.publish(NOTICE_ADDED, {"notice": notice.model_dump(mode="json")})
        return notice

    def record_overdue(self, reports: Iterable[Report]) -> List[Notice]:
        """
        Emit one warning notice per newly overdue report, persisted as one batch.

        Returns:
            The created notices, in the order of `reports`
        """
        reports = list(reports)
        created = []
        with self._lock:
            if reports:
                self._seed_if_empty()
            for report in reports:
                notice = Notice(
                    id=generate_id(),
                    title=f"Overdue: {report.title}",
                    content=f"Complaint {report.id} assigned to {report.department or 'Department'} is overdue.",
                    date=self._today(),
                    priority=NoticePriority.HIGH,
                    type=NoticeType.WARNING,
                )
                self._notices.insert(0, notice)
                created.append(notice)
            if created:
                self._persist()
        return created

    def reset_to_defaults(self) -> None:
        with self._lock:
            self._notices = self.default_notices()
            self._persist()
