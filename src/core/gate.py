"""
Working-day and working-hours gate.
"""

from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

from core.config import Settings
from core.errors import ConfigError
from models.events import TimeWindow, to_utc


class TimeWindowGate:
    """Decides whether a cycle should contact the calendar or force OFF."""

    def __init__(
        self,
        work_start: time = time(9, 0),
        work_end: time = time(17, 0),
        tz: ZoneInfo | timezone = timezone.utc,
        work_days: frozenset[int] = frozenset({0, 1, 2, 3, 4}),
    ):
        if work_start >= work_end:
            raise ConfigError(
                f"Working hours start {work_start:%H:%M} must be before end {work_end:%H:%M}"
            )
        self.work_start = work_start
        self.work_end = work_end
        self.tz = tz
        self.work_days = work_days

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimeWindowGate":
        return cls(
            work_start=settings.work_start,
            work_end=settings.work_end,
            tz=settings.work_timezone,
            work_days=settings.work_days,
        )

    def working_window(self, now: datetime) -> TimeWindow:
        """Working hours for the local calendar date of now, as a UTC window."""
        local_date = to_utc(now).astimezone(self.tz).date()
        return TimeWindow(
            start=datetime.combine(local_date, self.work_start, tzinfo=self.tz),
            end=datetime.combine(local_date, self.work_end, tzinfo=self.tz),
        )

    def should_evaluate(self, now: datetime) -> bool:
        """False on non-working days or outside working hours (bounds inclusive)."""
        local_now = to_utc(now).astimezone(self.tz)
        if local_now.weekday() not in self.work_days:
            return False
        return self.working_window(now).contains(now)
