"""Current status endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_indicator, verify_api_key
from api.models.responses import ErrorCodes, StatusResponse
from models.events import CycleResult
from services.indicator import MeetingIndicator

router = APIRouter(prefix="/v1")


def build_status_response(indicator: MeetingIndicator, result: CycleResult | None) -> StatusResponse:
    displayed = indicator.display.current
    response = StatusResponse(displayed=displayed.value if displayed else None)
    if result is not None:
        response.last_state = result.state.value
        response.last_status = result.status.value
        response.last_checked = result.now.isoformat()
        response.events_considered = result.events_considered
        response.error = result.error
    return response


@router.get("/status", response_model=StatusResponse)
async def get_status(
    indicator: MeetingIndicator = Depends(get_indicator),
    _api_key: str = Depends(verify_api_key),
):
    """Return what the display shows and how the latest cycle ended."""
    return build_status_response(indicator, indicator.last_result)


@router.post("/status/refresh", response_model=StatusResponse)
async def refresh_status(
    indicator: MeetingIndicator = Depends(get_indicator),
    _api_key: str = Depends(verify_api_key),
):
    """Run a cycle immediately instead of waiting for the next tick."""
    result = await indicator.refresh()
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "A status check is already running",
                "code": ErrorCodes.CYCLE_IN_PROGRESS,
                "details": [],
            },
        )
    return build_status_response(indicator, result)
