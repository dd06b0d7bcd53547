"""
Value parsing and validation.

Configuration values raise ConfigError naming the offending variable.
Event timestamps raise MalformedDataError so callers can drop the event.
"""

import re
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import ConfigError, MalformedDataError

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
# Graph returns 7 fractional digits ("2025-11-04T09:50:00.0000000")
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")

UTC_ALIASES = {"utc", "z", "etc/utc", "gmt"}


# =============================================================================
# CONFIGURATION VALUES
# =============================================================================


def parse_clock(value: str, name: str) -> time:
    """Parse an 'HH:MM' clock time."""
    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise ConfigError(f"{name} must be HH:MM, got '{value}'")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ConfigError(f"{name} is not a valid time of day: '{value}'")
    return time(hour, minute)


def parse_weekdays(value: str, name: str) -> frozenset[int]:
    """Parse a comma separated list of weekday numbers (Monday=0)."""
    days = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or int(part) > 6:
            raise ConfigError(f"{name} entries must be 0-6 (Monday=0), got '{part}'")
        days.add(int(part))
    if not days:
        raise ConfigError(f"{name} must list at least one weekday")
    return frozenset(days)


def parse_timezone(value: str, name: str) -> ZoneInfo:
    """Resolve an IANA timezone name."""
    try:
        return ZoneInfo(value.strip())
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"{name} is not a known timezone: '{value}'")


def parse_int(value: str, name: str, minimum: int = 1) -> int:
    """Parse an integer setting with a lower bound."""
    try:
        number = int(value, 16) if value.strip().lower().startswith("0x") else int(value)
    except (AttributeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got '{value}'")
    if number < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {number}")
    return number


# =============================================================================
# EVENT TIMESTAMPS
# =============================================================================


def resolve_event_zone(zone_name: str | None):
    """Return tzinfo for a Graph time_zone value (defaults to UTC)."""
    if not zone_name or zone_name.strip().lower() in UTC_ALIASES:
        return timezone.utc
    try:
        return ZoneInfo(zone_name.strip())
    except (ZoneInfoNotFoundError, ValueError):
        raise MalformedDataError(f"Unknown event time zone '{zone_name}'")


def parse_event_timestamp(value, zone_name: str | None = None) -> datetime:
    """
    Parse an event timestamp into an aware UTC datetime.

    Accepts datetime objects or ISO 8601 strings. Naive values are read in
    zone_name (UTC when absent).
    """
    if value is None:
        raise MalformedDataError("Missing timestamp")

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = _FRACTION_RE.sub(r"\1", value.strip())
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedDataError(f"Unparseable timestamp '{value}'")
    else:
        raise MalformedDataError(f"Unsupported timestamp type {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=resolve_event_zone(zone_name))
    return parsed.astimezone(timezone.utc)
