"""
Status evaluation: one decision per cycle.

gate -> fetch lookahead window -> overlap check -> render BUSY/FREE.
Failures while fetching, evaluating or rendering are reported through the
notifier; the display keeps whatever it showed before.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol

from core.config import DEFAULT_FETCH_TIMEOUT_SECONDS, DEFAULT_LOOKAHEAD_MINUTES
from core.errors import ApiError, AuthError, IndicatorError, NetworkError
from core.gate import TimeWindowGate
from core.overlap import is_active
from models.events import CycleResult, CycleState, MeetingEvent, Status, TimeWindow

logger = logging.getLogger(__name__)


class CalendarFetcher(Protocol):
    async def fetch(self, window: TimeWindow) -> Sequence[MeetingEvent]: ...


class Display(Protocol):
    current: Status | None

    def render(self, status: Status) -> None: ...

    def clear(self) -> None: ...

    def close(self) -> None: ...


class Notifier(Protocol):
    async def notify(self, message: str) -> None: ...


def describe_failure(error: BaseException) -> str:
    """Human-readable one-liner for a failed cycle."""
    if isinstance(error, AuthError):
        return f"Could not authenticate with the calendar service: {error}"
    if isinstance(error, NetworkError):
        return f"Calendar service unreachable: {error}"
    if isinstance(error, ApiError):
        return f"Calendar service returned an error: {error}"
    return f"Status check failed: {type(error).__name__}: {error}"


class StatusEvaluator:
    """Runs independent evaluation cycles against injected collaborators."""

    def __init__(
        self,
        gate: TimeWindowGate,
        fetcher: CalendarFetcher,
        display: Display,
        notifier: Notifier,
        lookahead_minutes: int = DEFAULT_LOOKAHEAD_MINUTES,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ):
        self.gate = gate
        self.fetcher = fetcher
        self.display = display
        self.notifier = notifier
        self.lookahead_minutes = lookahead_minutes
        self.fetch_timeout = fetch_timeout

    async def run_cycle(self, now: datetime | None = None) -> CycleResult:
        """Evaluate once. Never raises for fetch, evaluation or display failures."""
        now = now or datetime.now(timezone.utc)

        if not self.gate.should_evaluate(now):
            logger.info("Outside working hours at %s, turning display off", now.isoformat())
            try:
                self.display.render(Status.OFF)
            except Exception as e:
                return await self._fail(now, e, CycleState.GATED_OFF)
            return CycleResult(state=CycleState.GATED_OFF, status=Status.OFF, now=now)

        state = CycleState.FETCHING
        try:
            events = await self._fetch(TimeWindow.lookahead(now, self.lookahead_minutes))

            state = CycleState.EVALUATING
            status = Status.BUSY if is_active(now, events) else Status.FREE
            logger.info("%d event(s) in lookahead window, status %s", len(events), status.value)

            self.display.render(status)
        except Exception as e:
            return await self._fail(now, e, state)

        return CycleResult(
            state=CycleState.RESOLVED,
            status=status,
            now=now,
            events_considered=len(events),
        )

    async def _fetch(self, window: TimeWindow) -> Sequence[MeetingEvent]:
        try:
            return await asyncio.wait_for(self.fetcher.fetch(window), timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"Calendar fetch timed out after {self.fetch_timeout}s")

    async def _fail(self, now: datetime, error: Exception, state: CycleState) -> CycleResult:
        message = describe_failure(error)
        if isinstance(error, IndicatorError):
            logger.error("Cycle failed while %s: %s", state.value, message)
        else:
            logger.exception("Unexpected error while %s", state.value, exc_info=error)

        try:
            await self.notifier.notify(message)
        except Exception as e:
            logger.warning("Failed to deliver failure notification: %s", e)

        return CycleResult(state=CycleState.FAILED, status=Status.ERROR, now=now, error=message)
