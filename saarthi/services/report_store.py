"""
Report Store - authoritative collection of citizen reports.

Owns report creation (with deadline clamping), vote tallying and the
deadline-driven overdue sweep. Every mutation runs to completion under
`self.lock` before the next one observes state; the Vote Ledger shares the
same lock so a ledger record and its vote increment are one unit.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from saarthi.models.report import Report, ReportCreate, ReportStatus
from saarthi.services.event_bus import OVERDUE_CHECKED, REPORT_ADDED, STATUS_CHANGED, VOTE, EventBus
from saarthi.services.notice_board import NoticeBoard
from saarthi.services.state_storage import REPORTS_KEY, StateStorage
from saarthi.services.status_workflow import StatusWorkflowEngine
from saarthi.utils.ids import generate_id

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ReportStore:
    """
    In-process report collection, newest first, persisted as one document.

    Args:
        storage: Persistence collaborator
        bus: Change notification bus
        notice_board: Receives one notice per report the sweep marks overdue
        max_deadline_hours: Maximum horizon between assigned_at and due_by
        overdue_penalty: Priority added when a report becomes overdue
        clock: Source of "now" (injectable for tests)
    """

    def __init__(
        self,
        storage: StateStorage,
        bus: EventBus,
        notice_board: NoticeBoard,
        max_deadline_hours: float = 48,
        overdue_penalty: int = 5,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage
        self.bus = bus
        self.notice_board = notice_board
        self.max_deadline_hours = max_deadline_hours
        self.overdue_penalty = overdue_penalty
        self.clock = clock or _utcnow
        self.lock = threading.RLock()
        self._reports: List[Report] = self._load()

    @property
    def max_deadline_days(self) -> float:
        return self.max_deadline_hours / 24

    @property
    def max_horizon(self) -> timedelta:
        return timedelta(hours=self.max_deadline_hours)

    def _load(self) -> List[Report]:
        raw = self.storage.load(REPORTS_KEY).value or []
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed stored reports of type {type(raw).__name__}")
            raw = []
        reports = []
        for item in raw:
            try:
                reports.append(Report.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed stored report: {e}")
        logger.info(f"Loaded {len(reports)} report(s) from {self.storage.backend.name} storage")
        return reports

    def _persist(self) -> None:
        """Blocking write of the whole collection; async callers run mutations via asyncio.to_thread."""
        result = self.storage.save(REPORTS_KEY, [r.model_dump(mode="json") for r in self._reports])
        if not result.ok:
            logger.debug(f"Reports kept in memory only: {result.message}")

    def _index_of(self, report_id: str) -> int:
        for idx, report in enumerate(self._reports):
            if report.id == report_id:
                return idx
        return -1

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, report_id: str) -> Optional[Report]:
        with self.lock:
            idx = self._index_of(report_id)
            return self._reports[idx].model_copy(deep=True) if idx != -1 else None

    def exists(self, report_id: str) -> bool:
        with self.lock:
            return self._index_of(report_id) != -1

    def snapshot(self) -> List[Report]:
        """Copies of every report, newest first."""
        with self.lock:
            return [r.model_copy(deep=True) for r in self._reports]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _apply_deadline(self, fields: Dict[str, Any], now: datetime) -> None:
        deadline_days = fields.get("deadline_days")
        due_by = fields.get("due_by")
        if deadline_days is None and due_by is None:
            return

        assigned_at = as_utc(fields.get("assigned_at") or now)
        fields["assigned_at"] = assigned_at
        horizon_end = assigned_at + self.max_horizon

        if deadline_days is not None:
            deadline_days = min(float(deadline_days), self.max_deadline_days)
            if due_by is None:
                due_by = assigned_at + deadline_days * DAY

        due_by = min(as_utc(due_by), horizon_end)
        if deadline_days is None:
            deadline_days = max(0.0, (due_by - assigned_at) / DAY)

        fields["deadline_days"] = deadline_days
        fields["due_by"] = due_by

    def create(self, data: Union[ReportCreate, Dict[str, Any]]) -> Report:
        """
        Create a report.

        Defaults (status=pending, votes=0, priority=0) are overridden by any
        field the caller supplies. The deadline is clamped to the configured
        horizon and due_by is derived as assigned_at + deadline_days.

        Returns:
            The stored report
        """
        if not isinstance(data, ReportCreate):
            data = ReportCreate.model_validate(data)

        with self.lock:
            now = as_utc(self.clock())
            fields = data.model_dump(exclude_none=True)
            fields["tags"] = list(dict.fromkeys(fields.get("tags") or []))
            self._apply_deadline(fields, now)

            report = Report(
                **{
                    "status": ReportStatus.PENDING,
                    "votes": 0,
                    "priority": 0,
                    **fields,
                    "id": generate_id(),
                    "created_at": now,
                }
            )
            self._reports.insert(0, report)
            self._persist()
            created = report.model_copy(deep=True)

        logger.info(
            f"Report created: {created.id} status={created.status.value} "
            f"department={created.department or '-'} due_by={created.due_by.isoformat() if created.due_by else '-'}"
        )
        self.bus.publish(REPORT_ADDED, {"report": created.model_dump(mode="json")})
        return created

    def increment_vote(self, report_id: str) -> Optional[Report]:
        """
        Add one vote and set priority to the new vote count.

        Not deduplicated: the Vote Ledger decides whether a vote may land.

        Returns:
            Updated report, or None if no such report exists
        """
        with self.lock:
            idx = self._index_of(report_id)
            if idx == -1:
                logger.info(f"Vote for unknown report {report_id}")
                return None
            report = self._reports[idx]
            report.votes += 1
            # priority model: priority equals votes (overwrites any overdue penalty)
            report.priority = report.votes
            self._persist()
            updated = report.model_copy(deep=True)

        self.bus.publish(VOTE, {"id": updated.id, "votes": updated.votes})
        return updated

    def sweep_overdue(self, now: Optional[datetime] = None) -> int:
        """
        Mark every open report past its due_by as overdue.

        Each transitioned report gets +overdue_penalty priority and exactly
        one warning notice. Reports already overdue or resolved are skipped,
        so repeated or concurrent sweeps never double-penalize.

        Returns:
            Number of reports transitioned
        """
        with self.lock:
            now = as_utc(now or self.clock())
            transitioned = []
            for report in self._reports:
                if report.due_by is None:
                    continue
                if report.status in (ReportStatus.RESOLVED, ReportStatus.OVERDUE):
                    continue
                if as_utc(report.due_by) <= now:
                    report.status = ReportStatus.OVERDUE
                    report.priority += self.overdue_penalty
                    transitioned.append(report)

            if transitioned:
                self._persist()
                self.notice_board.record_overdue(transitioned)

        if transitioned:
            logger.info(f"Overdue sweep transitioned {len(transitioned)} report(s): {[r.id for r in transitioned]}")
            self.bus.publish(OVERDUE_CHECKED, {"count": len(transitioned)})
        return len(transitioned)

    def update_status(self, report_id: str, status: Union[ReportStatus, str]) -> Optional[Report]:
        """
        Administrative status change (resolve, start work).

        Returns:
            Updated report, or None if no such report exists

        Raises:
            ValueError: If the transition is not allowed
        """
        status = ReportStatus(status)
        if status == ReportStatus.OVERDUE:
            raise ValueError("Reports become overdue only through the overdue sweep")

        with self.lock:
            idx = self._index_of(report_id)
            if idx == -1:
                return None
            report = self._reports[idx]
            StatusWorkflowEngine.validate_transition(report.status.value, status.value)
            changed = report.status != status
            report.status = status
            if changed:
                self._persist()
            updated = report.model_copy(deep=True)

        if changed:
            logger.info(f"Report {report_id} status changed to {status.value}")
            self.bus.publish(STATUS_CHANGED, {"id": report_id, "status": status.value})
        return updated

    def replace_all(self, reports: Iterable[Report]) -> None:
        """Swap the whole collection (demo seeding). Publishes nothing."""
        with self.lock:
            self._reports = [r.model_copy(deep=True) for r in reports]
            self._persist()

    # ------------------------------------------------------------------
    # Status view helpers
    # ------------------------------------------------------------------

    def time_remaining(self, report: Report, now: Optional[datetime] = None) -> Optional[int]:
        """Seconds until due_by, clamped to [0, max horizon]; None without a deadline."""
        if report.due_by is None:
            return None
        now = as_utc(now or self.clock())
        seconds = round((as_utc(report.due_by) - now).total_seconds())
        return max(0, min(int(self.max_horizon.total_seconds()), seconds))

    @staticmethod
    def progress(report: Report) -> int:
        if report.status == ReportStatus.RESOLVED:
            return 100
        if report.status == ReportStatus.IN_PROGRESS:
            return 60
        return 20
