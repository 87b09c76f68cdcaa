"""
Community endpoints - notice list and karma.
"""

from typing import List

from fastapi import APIRouter, Depends

from saarthi.models.notice import Notice
from saarthi.services.engine import TriageEngine, get_engine

router = APIRouter(tags=["Community"])


@router.get("/notices", response_model=List[Notice])
async def list_notices(engine: TriageEngine = Depends(get_engine)):
    return engine.notices.list()


@router.get("/karma")
async def get_karma(engine: TriageEngine = Depends(get_engine)):
    return {"karma": engine.karma.get()}
