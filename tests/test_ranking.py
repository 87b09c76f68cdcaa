"""
Tests for ranking and filtering
"""
import math
from datetime import datetime, timedelta, timezone

import pytest

from saarthi.models.report import Report
from saarthi.services.ranking import MISSING_DISTANCE_KM, SortBy, annotate_distances, view

KM_PER_DEGREE_LAT = math.pi * 6371.0 / 180

BASE_TIME = datetime(2026, 1, 27, 9, 0, tzinfo=timezone.utc)


def north_of(origin, km):
    return origin[0] + km / KM_PER_DEGREE_LAT, origin[1]


def make_report(report_id, observer=None, km=None, priority=0, age_minutes=0):
    lat, lng = north_of(observer, km) if km is not None else (None, None)
    return Report(
        id=report_id,
        title=f"Report {report_id}",
        lat=lat,
        lng=lng,
        priority=priority,
        created_at=BASE_TIME - timedelta(minutes=age_minutes),
    )


def ids(items):
    return [i.report.id for i in items]


class TestRankingScenarios:
    """Test suite for the documented ranking scenarios."""

    @pytest.fixture(autouse=True)
    def setup(self, observer):
        self.observer = observer
        self.reports = [
            make_report("A", observer, km=2, priority=3, age_minutes=30),
            make_report("B", observer, km=1, priority=3, age_minutes=20),
            make_report("C", observer, km=10, priority=9, age_minutes=10),
        ]

    def test_distances_rounded(self):
        items = annotate_distances(self.reports, self.observer)
        assert [i.distance_km for i in items] == [2.0, 1.0, 10.0]

    def test_priority_then_distance(self):
        result = view(self.reports, observer=self.observer, sort_by=SortBy.PRIORITY)
        assert ids(result) == ["C", "B", "A"]

    def test_radius_filter(self):
        result = view(self.reports, observer=self.observer, radius_km=5)
        assert set(ids(result)) == {"A", "B"}

    def test_distance_sort(self):
        result = view(self.reports, observer=self.observer, sort_by="distance")
        assert ids(result) == ["B", "A", "C"]

    def test_recent_sort(self):
        result = view(self.reports, observer=self.observer, sort_by=SortBy.RECENT)
        assert ids(result) == ["C", "B", "A"]

    def test_radius_ignored_without_observer(self):
        result = view(self.reports, radius_km=5)
        assert len(result) == 3
        assert all(i.distance_km is None for i in result)

    def test_view_does_not_mutate(self):
        before = [r.model_dump() for r in self.reports]
        view(self.reports, observer=self.observer, radius_km=5, sort_by=SortBy.DISTANCE)
        assert [r.model_dump() for r in self.reports] == before


class TestMissingDistances:
    """Reports without coordinates."""

    @pytest.fixture(autouse=True)
    def setup(self, observer):
        self.observer = observer
        self.located = make_report("L", observer, km=3, priority=1)
        self.floating = make_report("F", priority=1)

    def test_missing_distance_sorts_last(self):
        result = view([self.floating, self.located], observer=self.observer, sort_by=SortBy.DISTANCE)
        assert ids(result) == ["L", "F"]
        assert result[1].distance_km is None

    def test_priority_tie_puts_missing_last(self):
        result = view([self.floating, self.located], observer=self.observer)
        assert ids(result) == ["L", "F"]

    def test_missing_distance_dropped_by_radius(self):
        result = view([self.floating, self.located], observer=self.observer, radius_km=100)
        assert ids(result) == ["L"]

    def test_zero_radius_is_honoured(self):
        at_observer = make_report("O", self.observer, km=0)
        result = view([self.located, at_observer], observer=self.observer, radius_km=0)
        assert ids(result) == ["O"]

    def test_sentinel_larger_than_any_real_distance(self):
        assert MISSING_DISTANCE_KM > 20015.1


class TestStability:
    """Equal keys keep their input order."""

    def test_equal_priority_and_distance_keep_order(self, observer):
        reports = [make_report(str(n), priority=2) for n in range(5)]
        result = view(reports, observer=observer, sort_by=SortBy.PRIORITY)
        assert ids(result) == ["0", "1", "2", "3", "4"]

    def test_distance_without_observer_falls_back_to_recent(self):
        reports = [
            make_report("old", age_minutes=60),
            make_report("new", age_minutes=1),
        ]
        result = view(reports, sort_by=SortBy.DISTANCE)
        assert ids(result) == ["new", "old"]
