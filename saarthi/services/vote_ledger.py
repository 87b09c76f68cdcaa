"""
Vote Ledger - at most one vote per (user, report).

The ledger is a per-user set of report ids. Membership check, ledger
record and the store's vote increment all run under the Report Store's
lock, so neither side can hold a vote the other does not.
"""

import logging
from typing import Dict, List, Optional, Set

from saarthi.models.report import VoteOutcome
from saarthi.models.result import ErrorKind
from saarthi.services.report_store import ReportStore
from saarthi.services.state_storage import VOTES_KEY, StateStorage

logger = logging.getLogger(__name__)


class VoteLedger:
    """Service for deduplicated community voting on reports."""

    def __init__(self, storage: StateStorage, store: ReportStore):
        self.storage = storage
        self.store = store
        self._votes: Dict[str, Set[str]] = self._load()

    def _load(self) -> Dict[str, Set[str]]:
        raw = self.storage.load(VOTES_KEY).value or {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed stored vote ledger of type {type(raw).__name__}")
            return {}
        votes = {}
        for user_id, report_ids in raw.items():
            if not isinstance(report_ids, (list, tuple, set)):
                logger.warning(f"Skipping malformed stored votes for user {user_id!r}")
                continue
            votes[str(user_id)] = {str(r) for r in report_ids}
        return votes

    def _persist(self) -> None:
        result = self.storage.save(VOTES_KEY, {u: sorted(ids) for u, ids in self._votes.items()})
        if not result.ok:
            logger.debug(f"Vote ledger kept in memory only: {result.message}")

    def has_voted(self, report_id: str, user_id: Optional[str]) -> bool:
        if not user_id:
            return False
        with self.store.lock:
            return report_id in self._votes.get(user_id, set())

    def votes_for(self, user_id: Optional[str]) -> List[str]:
        """Report ids this user has voted for."""
        if not user_id:
            return []
        with self.store.lock:
            return sorted(self._votes.get(user_id, set()))

    def cast_vote(self, report_id: str, user_id: Optional[str]) -> VoteOutcome:
        """
        Record a vote and increment the report as one unit.

        Rejections (no state change):
        - not-authenticated: no user id
        - already-voted: user already in the ledger for this report
        - not-found: report does not exist

        Returns:
            VoteOutcome carrying the updated report when accepted
        """
        if not user_id:
            return VoteOutcome(accepted=False, reason=ErrorKind.NOT_AUTHENTICATED.value)

        with self.store.lock:
            user_votes = self._votes.get(user_id, set())
            if report_id in user_votes:
                return VoteOutcome(accepted=False, reason=ErrorKind.ALREADY_VOTED.value)
            if not self.store.exists(report_id):
                return VoteOutcome(accepted=False, reason=ErrorKind.NOT_FOUND.value)

            updated = self.store.increment_vote(report_id)
            self._votes[user_id] = user_votes | {report_id}
            self._persist()

        logger.info(f"Vote accepted: user={user_id} report={report_id} votes={updated.votes}")
        return VoteOutcome(accepted=True, report=updated)
