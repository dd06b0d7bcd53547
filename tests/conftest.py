"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, time, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.gate import TimeWindowGate  # noqa: E402
from models.events import MeetingEvent, Status  # noqa: E402
from services.status import StatusEvaluator  # noqa: E402

# 2025-11-04 is a Tuesday, 2025-11-08 a Saturday
TUESDAY_10AM = datetime(2025, 11, 4, 10, 0, tzinfo=timezone.utc)
SATURDAY_10AM = datetime(2025, 11, 8, 10, 0, tzinfo=timezone.utc)


class AlwaysOpenGate(TimeWindowGate):
    """Gate that never forces OFF, for tests that run on the wall clock."""

    def should_evaluate(self, now):
        return True


class FakeFetcher:
    """Returns canned events or raises a canned error."""

    def __init__(self, events=None, error: Exception | None = None):
        self.events = events or []
        self.error = error
        self.windows = []

    async def fetch(self, window):
        self.windows.append(window)
        if self.error is not None:
            raise self.error
        return list(self.events)


class FakeDisplay:
    def __init__(self, fail: bool = False):
        self.current: Status | None = None
        self.rendered: list[Status] = []
        self.cleared = 0
        self.closed = False
        self.fail = fail

    def render(self, status: Status) -> None:
        if self.fail:
            raise OSError("I2C bus error")
        self.rendered.append(status)
        self.current = status

    def clear(self) -> None:
        self.cleared += 1
        self.current = None

    def close(self) -> None:
        self.closed = True


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.messages: list[str] = []
        self.fail = fail

    async def notify(self, message: str) -> None:
        self.messages.append(message)
        if self.fail:
            raise RuntimeError("push service down")


@pytest.fixture
def tuesday_10am():
    return TUESDAY_10AM


@pytest.fixture
def saturday_10am():
    return SATURDAY_10AM


@pytest.fixture
def gate():
    """09:00-17:00 UTC, Monday to Friday."""
    return TimeWindowGate(work_start=time(9, 0), work_end=time(17, 0), tz=timezone.utc)


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def make_evaluator(gate, display, notifier):
    """Build a StatusEvaluator around a FakeFetcher."""

    def _make(events=None, error=None, **kwargs):
        fetcher = FakeFetcher(events=events, error=error)
        evaluator = StatusEvaluator(
            gate=kwargs.pop("gate", gate),
            fetcher=fetcher,
            display=kwargs.pop("display", display),
            notifier=kwargs.pop("notifier", notifier),
            **kwargs,
        )
        return evaluator, fetcher

    return _make


@pytest.fixture
def meeting():
    """Build a MeetingEvent from two datetimes."""

    def _meeting(start, end, subject="Standup"):
        return MeetingEvent(start=start, end=end, subject=subject)

    return _meeting
