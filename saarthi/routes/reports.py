"""
Report endpoints - submission, ranked listing and community voting.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from saarthi.models.report import RankedReport, Report, ReportSubmission, SubmissionResult, VoteOutcome
from saarthi.models.result import ErrorKind
from saarthi.services.engine import TriageEngine, get_engine
from saarthi.services.ranking import SortBy, view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])

VOTE_REJECTION_STATUS = {
    ErrorKind.NOT_AUTHENTICATED.value: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ALREADY_VOTED.value: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SubmissionResult)
async def submit_report(submission: ReportSubmission, engine: TriageEngine = Depends(get_engine)):
    """
    Submit a new complaint.

    The complaint is classified (image labels or text keywords), routed to a
    department with a clamped deadline and stored as in-progress.
    """
    try:
        result = await engine.submissions.submit(submission)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.info(f"✅ Report submitted: {result.report.id} -> {result.report.department}")
    return result


@router.get("", response_model=List[RankedReport])
async def list_reports(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Observer latitude"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Observer longitude"),
    radius_km: Optional[float] = Query(None, gt=0, description="Only reports within this radius"),
    sort_by: SortBy = Query(SortBy.PRIORITY),
    engine: TriageEngine = Depends(get_engine),
):
    """Reports ranked by priority, distance or recency, optionally near an observer."""
    observer = (lat, lng) if lat is not None and lng is not None else None
    return view(engine.store.snapshot(), observer=observer, radius_km=radius_km, sort_by=sort_by)


@router.get("/{report_id}", response_model=Report)
async def get_report(report_id: str, engine: TriageEngine = Depends(get_engine)):
    report = engine.store.get(report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return report


@router.post("/{report_id}/vote", response_model=VoteOutcome)
async def vote_report(
    report_id: str,
    x_user_id: Optional[str] = Header(None),
    engine: TriageEngine = Depends(get_engine),
):
    """Upvote a report once per user. Identity comes from the X-User-Id header."""
    outcome = await asyncio.to_thread(engine.ledger.cast_vote, report_id, x_user_id)
    if not outcome.accepted:
        raise HTTPException(
            status_code=VOTE_REJECTION_STATUS.get(outcome.reason, status.HTTP_400_BAD_REQUEST),
            detail=outcome.reason,
        )
    return outcome


@router.get("/{report_id}/vote")
async def has_voted(
    report_id: str,
    x_user_id: Optional[str] = Header(None),
    engine: TriageEngine = Depends(get_engine),
):
    return {"report_id": report_id, "has_voted": engine.ledger.has_voted(report_id, x_user_id)}
