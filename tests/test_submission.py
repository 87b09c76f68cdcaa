"""
Tests for the submission flow, engine wiring and community side effects
"""
import asyncio
import time
from datetime import timedelta

import pytest

from saarthi.core.settings import settings
from saarthi.models.notice import NoticePriority, NoticeType
from saarthi.models.report import ReportStatus, ReportSubmission
from saarthi.services.classifier.classifier import IMAGE_UNAVAILABLE_DESCRIPTION
from saarthi.services.classifier.noop_labeler import NoOpImageLabeler
from saarthi.services.engine import build_engine
from saarthi.services.event_bus import KARMA, NOTICE_ADDED, REPORT_ADDED, SEEDED
from saarthi.services.overdue_scheduler import OverdueSweepScheduler
from saarthi.services.state_storage import NOTICES_KEY, MemoryStateBackend, StateStorage


class TestSubmissionService:
    """Test suite for classify -> create -> karma."""

    @pytest.fixture(autouse=True)
    def setup(self, engine, recorder, clock):
        self.engine = engine
        self.recorder = recorder
        self.clock = clock

    def submit(self, **fields):
        return asyncio.run(self.engine.submissions.submit(ReportSubmission(**fields)))

    def test_text_submission_routed_and_clamped(self):
        result = self.submit(title="There is a large pothole on the main road", lat=28.47, lng=77.50)
        report = result.report

        assert result.classification.category == "INFRASTRUCTURE"
        assert result.classification.deadline == 7
        assert report.department == "Public Works Department"
        assert report.department_details.email == "pwd@gnoaida.gov.in"
        assert report.status == ReportStatus.IN_PROGRESS
        assert report.tags == ["infrastructure"]
        assert report.deadline_days == 2.0
        assert report.due_by == report.assigned_at + timedelta(days=2)

    def test_karma_awarded(self):
        self.submit(title="Garbage not collected for a week")

        assert self.engine.karma.get() == settings.DEFAULT_KARMA + settings.SUBMISSION_KARMA_POINTS
        assert self.recorder.named(KARMA)[0]["points"] == settings.SUBMISSION_KARMA_POINTS
        assert len(self.recorder.named(REPORT_ADDED)) == 1

    def test_empty_submission_rejected(self):
        with pytest.raises(ValueError):
            self.submit(title="   ")
        assert self.engine.store.snapshot() == []
        assert self.recorder.named(KARMA) == []

    def test_image_only_falls_back_to_general(self):
        result = self.submit(image_ref="uploads/photo.jpg")

        assert result.classification.category == "GENERAL"
        assert result.classification.confidence == 0.15
        assert result.report.title == "Image complaint"
        assert result.report.description == IMAGE_UNAVAILABLE_DESCRIPTION
        assert result.report.department == "General Administration"

    def test_image_with_text_uses_keywords(self):
        result = self.submit(title="Streetlight not working", image_ref="uploads/photo.jpg")
        assert result.classification.confidence == 0.75

    def test_missing_location_uses_default(self):
        report = self.submit(title="Water leak in the colony").report

        assert (report.lat, report.lng) == (settings.DEFAULT_LAT, settings.DEFAULT_LNG)
        assert report.direction is None

    def test_direction_from_observer(self):
        report = self.submit(
            title="Broken park bench",
            lat=28.48,
            lng=77.50,
            observer_lat=28.47,
            observer_lng=77.50,
        ).report
        assert report.direction == "N"


class TestEngine:
    """Test suite for engine wiring and demo seeding."""

    def test_single_store_instance(self, engine):
        assert engine.ledger.store is engine.store
        assert engine.submissions.store is engine.store
        assert engine.store.notice_board is engine.notices

    def test_seed_demo_data(self, engine, recorder, clock):
        engine.store.create({"title": "Replaced by seed"})
        engine.karma.add(50)

        reports = engine.seed_demo_data()

        assert len(reports) == 4
        assert "Replaced by seed" not in [r.title for r in reports]
        assert engine.karma.get() == settings.DEFAULT_KARMA
        assert [n.id for n in engine.notices.list()] == ["N-2025-001", "N-2025-002"]
        assert recorder.named(SEEDED) == [{}]
        for report in reports:
            assert report.due_by - report.assigned_at <= timedelta(hours=settings.MAX_DEADLINE_HOURS)

    def test_seeded_reports_go_overdue(self, engine, clock):
        engine.seed_demo_data()
        clock.advance(days=3)

        # three pending + one in-progress, none resolved
        assert engine.store.sweep_overdue() == 4


class TestNoticeBoard:
    """Test suite for the notice list."""

    def test_empty_board_seeded_with_defaults(self, engine):
        notices = engine.notices.list()

        assert [n.title for n in notices] == ["Road Repair Schedule", "Water Supply Interruption"]
        assert notices[1].priority == NoticePriority.HIGH

    def test_add_notice_publishes(self, engine, recorder):
        notice = engine.notices.add_notice("Ward meeting", "Ward 4 meeting on Monday", type=NoticeType.INFO)

        assert engine.notices.list()[0].id == notice.id
        assert recorder.named(NOTICE_ADDED)[0]["notice"]["title"] == "Ward meeting"

    def test_add_notice_keeps_defaults_on_fresh_board(self, engine):
        notice = engine.notices.add_notice("Ward meeting", "Ward 4 meeting on Monday")

        ids = [n.id for n in engine.notices.list()]

        assert ids == [notice.id, "N-2025-001", "N-2025-002"]

    def test_overdue_sweep_keeps_defaults_on_fresh_board(self, engine, clock):
        engine.store.create({"title": "Late", "deadline_days": 1})
        clock.advance(days=2)

        engine.store.sweep_overdue()

        notices = engine.notices.list()
        assert [n.title for n in notices][0] == "Overdue: Late"
        assert [n.id for n in notices][1:] == ["N-2025-001", "N-2025-002"]
        stored = engine.storage.load(NOTICES_KEY).value
        assert [n["id"] for n in stored][1:] == ["N-2025-001", "N-2025-002"]

    def test_empty_sweep_leaves_board_untouched(self, engine, storage):
        engine.store.sweep_overdue()
        assert storage.load(NOTICES_KEY).value is None


class TestKarma:
    """Test suite for the karma counter."""

    def test_default_then_add(self, engine):
        assert engine.karma.get() == settings.DEFAULT_KARMA
        assert engine.karma.add(5) == settings.DEFAULT_KARMA + 5

    def test_survives_reload(self, engine, storage, bus):
        from saarthi.services.karma import KarmaCounter

        engine.karma.add(7)
        reloaded = KarmaCounter(storage, bus, default=settings.DEFAULT_KARMA)

        assert reloaded.get() == settings.DEFAULT_KARMA + 7


class TestOverdueScheduler:
    """Test suite for the periodic sweep."""

    def test_runs_sweep_on_start(self, engine, clock):
        engine.store.create({"title": "Late", "deadline_days": 1})
        clock.advance(days=2)

        async def run():
            scheduler = OverdueSweepScheduler(engine.store, interval_seconds=0.01)
            scheduler.start()
            assert scheduler.running
            await asyncio.sleep(0.05)
            await scheduler.stop()
            return scheduler

        scheduler = asyncio.run(run())

        assert not scheduler.running
        assert engine.store.snapshot()[0].status == ReportStatus.OVERDUE


class SlowMemoryBackend(MemoryStateBackend):
    """Memory backend whose writes block like a remote database round trip."""

    def __init__(self):
        super().__init__()
        self.write_delay = 0.0

    def write(self, key, value):
        time.sleep(self.write_delay)
        super().write(key, value)


class TestSlowStorage:
    """Store writes never stall the event loop."""

    @pytest.fixture(autouse=True)
    def setup(self, bus, clock):
        self.backend = SlowMemoryBackend()
        self.clock = clock
        self.engine = build_engine(
            storage=StateStorage(self.backend), bus=bus, labeler=NoOpImageLabeler(), clock=clock
        )

    def test_scheduled_sweep_runs_off_loop(self):
        report = self.engine.store.create({"title": "Late", "deadline_days": 1})
        self.clock.advance(days=2)
        self.backend.write_delay = 0.3

        async def run():
            scheduler = OverdueSweepScheduler(self.engine.store, interval_seconds=60)
            started = time.monotonic()
            scheduler.start()
            await asyncio.sleep(0.01)
            elapsed = time.monotonic() - started
            for _ in range(100):
                if self.engine.store.get(report.id).status == ReportStatus.OVERDUE:
                    break
                await asyncio.sleep(0.02)
            await scheduler.stop()
            return elapsed

        elapsed = asyncio.run(run())

        assert elapsed < 0.2
        assert self.engine.store.get(report.id).status == ReportStatus.OVERDUE

    def test_submission_write_runs_off_loop(self):
        self.backend.write_delay = 0.3

        async def run():
            task = asyncio.create_task(
                self.engine.submissions.submit(ReportSubmission(title="Water leak near the park"))
            )
            started = time.monotonic()
            await asyncio.sleep(0.01)
            elapsed = time.monotonic() - started
            return elapsed, await task

        elapsed, result = asyncio.run(run())

        assert elapsed < 0.2
        assert self.engine.store.get(result.report.id) is not None
        assert self.engine.karma.get() == settings.DEFAULT_KARMA + settings.SUBMISSION_KARMA_POINTS
