"""
Saarthi Complaint Engine - FastAPI Application Entry Point

Citizens report civic issues; the engine routes each report to a
department, ranks reports by urgency and distance, deduplicates community
votes and flags missed deadlines.
"""

import sys
import traceback
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from saarthi.core.settings import settings
from saarthi.routes import admin, community, health, reports
from saarthi.services.engine import get_engine
from saarthi.services.overdue_scheduler import OverdueSweepScheduler

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Complaint triage & lifecycle engine for citizen-reported civic issues",
    debug=settings.DEBUG,
)

_scheduler: Optional[OverdueSweepScheduler] = None


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.write(f"🔥 Unhandled exception on {request.method} {request.url.path}\n")
    sys.stderr.write(traceback.format_exc())
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.flush()

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """
    Build the engine (storage, classifier) and start the overdue sweep.
    Storage and classifier failures degrade, they never stop startup.
    """
    global _scheduler
    print(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    engine = get_engine()
    await engine.classifier.initialize()

    _scheduler = OverdueSweepScheduler(engine.store, settings.OVERDUE_SWEEP_INTERVAL_SECONDS)
    _scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    print(f"Shutting down {settings.APP_NAME}")
    if _scheduler is not None:
        await _scheduler.stop()


app.include_router(health.router)
app.include_router(reports.router)
app.include_router(community.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "reports": "/reports?lat={lat}&lng={lng}&radius_km={km}&sort_by=priority",
    }
