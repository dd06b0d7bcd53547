"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    scheduler_running: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class StatusResponse(BaseModel):
    """Currently displayed status and the latest cycle outcome."""

    displayed: str | None  # None until the first successful render
    last_state: str | None = None
    last_status: str | None = None
    last_checked: str | None = None  # ISO 8601 UTC
    events_considered: int = 0
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    UNAUTHORIZED = "UNAUTHORIZED"
    CYCLE_IN_PROGRESS = "CYCLE_IN_PROGRESS"
    INTERNAL_ERROR = "INTERNAL_ERROR"
