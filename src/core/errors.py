"""
Error taxonomy for the meeting indicator.

AuthError, NetworkError and ApiError abort a cycle and are reported through
the notifier. MalformedDataError is recovered locally by dropping the event.
ConfigError is raised at startup only.
"""


class IndicatorError(Exception):
    """Base class for all meeting indicator errors."""


class ConfigError(IndicatorError):
    """A configuration value is missing or invalid."""


class AuthError(IndicatorError):
    """Token acquisition failed."""


class NetworkError(IndicatorError):
    """Transport failure or timeout while talking to a remote service."""


class ApiError(IndicatorError):
    """A remote endpoint answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        base = super().__str__()
        parts = [str(p) for p in (self.status_code, self.code) if p]
        if parts:
            return f"{base} ({' '.join(parts)})"
        return base


class MalformedDataError(IndicatorError):
    """An event carries a timestamp that cannot be interpreted."""
