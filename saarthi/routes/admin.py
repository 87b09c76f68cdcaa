"""
Admin endpoints - lifecycle maintenance and demo data.

Authorization is enforced outside this service.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from saarthi.models.report import Report, ReportStatus
from saarthi.services.engine import TriageEngine, get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


class StatusUpdate(BaseModel):
    status: ReportStatus


@router.post("/overdue-sweep")
async def run_overdue_sweep(engine: TriageEngine = Depends(get_engine)):
    """Run the overdue sweep now (it is idempotent)."""
    transitioned = await asyncio.to_thread(engine.store.sweep_overdue)
    return {"transitioned": transitioned}


@router.post("/seed")
async def seed_demo_data(engine: TriageEngine = Depends(get_engine)):
    """Replace reports, notices and karma with demo data."""
    reports = await asyncio.to_thread(engine.seed_demo_data)
    return {"seeded": len(reports)}


@router.patch("/reports/{report_id}/status", response_model=Report)
async def update_report_status(report_id: str, update: StatusUpdate, engine: TriageEngine = Depends(get_engine)):
    try:
        report = await asyncio.to_thread(engine.store.update_status, report_id, update.status)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    logger.info(f"✅ Admin updated report {report_id} status to {report.status.value}")
    return report
