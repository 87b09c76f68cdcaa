"""
Tests for the vote ledger
"""
import threading

import pytest

from saarthi.models.result import ErrorKind
from saarthi.services.state_storage import VOTES_KEY, MemoryStateBackend, StateStorage
from saarthi.services.vote_ledger import VoteLedger


class TestVoteLedger:
    """Test suite for deduplicated voting."""

    @pytest.fixture(autouse=True)
    def setup(self, engine, storage):
        self.engine = engine
        self.storage = storage
        self.store = engine.store
        self.ledger = engine.ledger
        self.report = self.store.create({"title": "Streetlight out", "deadline_days": 1})

    def test_first_vote_accepted(self):
        outcome = self.ledger.cast_vote(self.report.id, "user-1")

        assert outcome.accepted is True
        assert outcome.report.votes == 1
        assert outcome.report.priority == 1
        assert self.ledger.has_voted(self.report.id, "user-1") is True

    def test_second_vote_rejected(self):
        self.ledger.cast_vote(self.report.id, "user-1")

        outcome = self.ledger.cast_vote(self.report.id, "user-1")

        assert outcome.accepted is False
        assert outcome.reason == ErrorKind.ALREADY_VOTED.value
        assert self.store.get(self.report.id).votes == 1

    def test_distinct_users_both_count(self):
        self.ledger.cast_vote(self.report.id, "user-1")
        self.ledger.cast_vote(self.report.id, "user-2")
        assert self.store.get(self.report.id).votes == 2

    def test_anonymous_rejected(self):
        for user_id in (None, ""):
            outcome = self.ledger.cast_vote(self.report.id, user_id)
            assert outcome.accepted is False
            assert outcome.reason == ErrorKind.NOT_AUTHENTICATED.value
        assert self.store.get(self.report.id).votes == 0
        assert self.ledger.has_voted(self.report.id, None) is False

    def test_unknown_report_leaves_no_record(self):
        outcome = self.ledger.cast_vote("missing", "user-1")

        assert outcome.accepted is False
        assert outcome.reason == ErrorKind.NOT_FOUND.value
        assert self.ledger.has_voted("missing", "user-1") is False
        assert self.ledger.votes_for("user-1") == []

    def test_votes_for_user(self):
        other = self.store.create({"title": "Garbage pile"})
        self.ledger.cast_vote(self.report.id, "user-1")
        self.ledger.cast_vote(other.id, "user-1")

        assert self.ledger.votes_for("user-1") == sorted([self.report.id, other.id])

    def test_ledger_persisted(self):
        self.ledger.cast_vote(self.report.id, "user-1")

        assert self.storage.load(VOTES_KEY).value == {"user-1": [self.report.id]}
        reloaded = VoteLedger(self.storage, self.store)
        assert reloaded.has_voted(self.report.id, "user-1") is True

    def test_concurrent_votes_from_one_user_count_once(self):
        barrier = threading.Barrier(8)
        outcomes = []

        def vote():
            barrier.wait()
            outcomes.append(self.ledger.cast_vote(self.report.id, "user-1"))

        threads = [threading.Thread(target=vote) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(1 for o in outcomes if o.accepted) == 1
        assert self.store.get(self.report.id).votes == 1


class TestVoteLedgerStorage:
    """Ledger works from a pre-populated backend."""

    def test_loads_existing_votes(self, engine):
        report = engine.store.create({"title": "Tree fallen"})
        storage = StateStorage(MemoryStateBackend({VOTES_KEY: {"user-9": [report.id]}}))

        ledger = VoteLedger(storage, engine.store)

        assert ledger.has_voted(report.id, "user-9") is True
        assert ledger.cast_vote(report.id, "user-9").reason == ErrorKind.ALREADY_VOTED.value

    def test_malformed_ledger_ignored(self, engine):
        report = engine.store.create({"title": "Corrupt ledger"})
        storage = StateStorage(MemoryStateBackend({VOTES_KEY: ["user-1", report.id]}))

        ledger = VoteLedger(storage, engine.store)

        assert ledger.votes_for("user-1") == []
        assert ledger.cast_vote(report.id, "user-1").accepted is True

    def test_malformed_user_entry_skipped(self, engine):
        report = engine.store.create({"title": "Partly corrupt"})
        storage = StateStorage(MemoryStateBackend({VOTES_KEY: {"user-1": 42, "user-2": [report.id]}}))

        ledger = VoteLedger(storage, engine.store)

        assert ledger.has_voted(report.id, "user-1") is False
        assert ledger.has_voted(report.id, "user-2") is True
