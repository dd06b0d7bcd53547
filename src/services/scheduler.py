"""
Cron-driven trigger for evaluation cycles.

Runs one cycle immediately on start, then at every occurrence of the cron
expression (UTC). Cycles never overlap: a tick that fires while the previous
cycle is still running is skipped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from croniter import croniter

from core.errors import ConfigError

logger = logging.getLogger(__name__)


def next_run_at(cron: str, now: datetime | None = None) -> datetime:
    """Compute the next run time for a cron expression from now (UTC)."""
    anchor = now or datetime.now(UTC)
    return croniter(cron, anchor).get_next(datetime).replace(tzinfo=UTC)


class CycleScheduler:
    def __init__(self, run: Callable[[], Awaitable[object]], cron: str):
        if not croniter.is_valid(cron):
            raise ConfigError(f"Invalid cron expression '{cron}'")
        self.run = run
        self.cron = cron
        self._lock = asyncio.Lock()
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def tick(self) -> bool:
        """Run one cycle unless one is already in progress. Returns False when skipped."""
        if self._lock.locked():
            logger.warning("Previous cycle still running, skipping this tick")
            return False
        async with self._lock:
            try:
                await self.run()
            except Exception:
                logger.exception("Cycle raised unexpectedly")
        return True

    def _spawn_tick(self) -> None:
        task = asyncio.create_task(self.tick())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def next_run_after(self, previous: datetime | None = None) -> datetime:
        """
        Next cron occurrence strictly after the previous scheduled run.

        The sleep before a run can end slightly early, so the wall clock may
        still read just before `previous`; anchoring on it keeps one run per
        occurrence. A late wake-up anchors on the clock instead, so missed
        occurrences are not replayed.
        """
        now = datetime.now(UTC)
        if previous is None or previous < now:
            return next_run_at(self.cron, now)
        return next_run_at(self.cron, previous)

    async def _loop(self) -> None:
        self._spawn_tick()
        next_run = None
        while not self._stop.is_set():
            next_run = self.next_run_after(next_run)
            delay = max(0.0, (next_run - datetime.now(UTC)).total_seconds())
            logger.debug("Next cycle at %s", next_run.isoformat())
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                self._spawn_tick()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._loop())
        logger.info("Scheduler started (%s)", self.cron)

    async def stop(self) -> None:
        """Stop triggering and wait for an in-progress cycle to finish."""
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)
        logger.info("Scheduler stopped")
