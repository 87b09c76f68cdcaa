"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from saarthi.core.settings import settings
from saarthi.services.engine import TriageEngine, get_engine

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/storage")
async def storage_health(engine: TriageEngine = Depends(get_engine)):
    """
    Persistence status. A degraded storage still serves requests from the
    in-memory copy, so this reports rather than fails.
    """
    storage = engine.storage.status()
    return {
        "status": "degraded" if storage["degraded"] else "healthy",
        **storage,
        "classifier_image_path": not engine.classifier.image_path_disabled,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
