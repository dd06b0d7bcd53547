"""API Pydantic models."""

from .responses import ErrorCodes, ErrorResponse, HealthResponse, StatusResponse

__all__ = ["HealthResponse", "StatusResponse", "ErrorResponse", "ErrorCodes"]
