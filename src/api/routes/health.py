"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_indicator
from api.models.responses import HealthResponse
from core.config import API_VERSION
from services.indicator import MeetingIndicator

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(indicator: MeetingIndicator = Depends(get_indicator)):
    """
    Health check endpoint for monitoring.

    Returns 200 if the scheduler is running, 503 otherwise.
    """
    running = indicator.scheduler.running
    timestamp = datetime.now(timezone.utc).isoformat()

    if running:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            scheduler_running=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                scheduler_running=False,
                timestamp=timestamp,
                error="Scheduler is not running",
            ).model_dump(),
        )
