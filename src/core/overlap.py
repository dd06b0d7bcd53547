"""
Meeting overlap check against the current instant.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from core.errors import MalformedDataError
from models.events import MeetingEvent, to_utc

logger = logging.getLogger(__name__)


def event_bounds(event: MeetingEvent) -> tuple[datetime, datetime]:
    """
    Return (start, end) in UTC.

    Raises:
        MalformedDataError: missing, naive or inverted timestamps
    """
    start = getattr(event, "start", None)
    end = getattr(event, "end", None)
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        raise MalformedDataError("Event is missing a start or end timestamp")
    try:
        start, end = to_utc(start), to_utc(end)
    except ValueError as e:
        raise MalformedDataError(str(e))
    if start > end:
        raise MalformedDataError(f"Event ends before it starts ({start.isoformat()})")
    return start, end


def active_events(now: datetime, events: Iterable[MeetingEvent]) -> list[MeetingEvent]:
    """Events whose closed interval [start, end] contains now."""
    current = to_utc(now)
    active = []
    for event in events:
        try:
            start, end = event_bounds(event)
        except MalformedDataError as e:
            logger.warning("Skipping event %r: %s", getattr(event, "subject", event), e)
            continue
        if start <= current <= end:
            active.append(event)
    return active


def is_active(now: datetime, events: Iterable[MeetingEvent]) -> bool:
    """True if at least one event is in progress at now."""
    if not events:
        return False
    return bool(active_events(now, events))
