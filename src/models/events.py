"""
Data models for calendar events and indicator status.

Frozen dataclasses: events are rebuilt from each fetch response and
discarded after one cycle.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class Status(str, Enum):
    """Presence status produced once per cycle."""

    OFF = "off"
    BUSY = "busy"
    FREE = "free"
    ERROR = "error"


class CycleState(str, Enum):
    """Terminal state reached by one evaluation cycle."""

    GATED_OFF = "gated_off"
    FETCHING = "fetching"
    EVALUATING = "evaluating"
    RESOLVED = "resolved"
    FAILED = "failed"


def to_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to UTC. Naive datetimes are rejected."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"Naive datetime not allowed: {value.isoformat()}")
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeWindow:
    """Closed time interval [start, end], stored in UTC."""

    start: datetime
    end: datetime

    def __post_init__(self):
        start = to_utc(self.start)
        end = to_utc(self.end)
        if start > end:
            raise ValueError(f"Window start {start.isoformat()} is after end {end.isoformat()}")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def lookahead(cls, now: datetime, minutes: int) -> "TimeWindow":
        """Window from now to now + minutes."""
        return cls(start=now, end=now + timedelta(minutes=minutes))

    def contains(self, instant: datetime) -> bool:
        return self.start <= to_utc(instant) <= self.end


@dataclass(frozen=True)
class MeetingEvent:
    """A calendar entry reduced to what the indicator needs."""

    start: datetime | None
    end: datetime | None
    subject: str = ""
    event_id: str | None = None


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one evaluation cycle."""

    state: CycleState
    status: Status
    now: datetime
    events_considered: int = 0
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.state is CycleState.FAILED
