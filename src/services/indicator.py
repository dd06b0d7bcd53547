"""
Meeting indicator supervisor: wires collaborators together and owns the
process lifecycle (start, single refresh, shutdown hook).
"""

import logging

from core.config import Settings
from core.gate import TimeWindowGate
from models.events import CycleResult
from services.calendar import GraphCalendarFetcher
from services.display import build_display
from services.notifications import build_notifier
from services.scheduler import CycleScheduler
from services.status import StatusEvaluator

logger = logging.getLogger(__name__)


class MeetingIndicator:
    def __init__(self, evaluator: StatusEvaluator, cron: str):
        self.evaluator = evaluator
        self.scheduler = CycleScheduler(self.run_once, cron)
        self.last_result: CycleResult | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MeetingIndicator":
        evaluator = StatusEvaluator(
            gate=TimeWindowGate.from_settings(settings),
            fetcher=GraphCalendarFetcher.from_settings(settings),
            display=build_display(settings),
            notifier=build_notifier(settings),
            lookahead_minutes=settings.lookahead_minutes,
            fetch_timeout=settings.fetch_timeout_seconds,
        )
        return cls(evaluator, settings.cron_expression)

    @property
    def display(self):
        return self.evaluator.display

    async def run_once(self, now=None) -> CycleResult:
        result = await self.evaluator.run_cycle(now)
        self.last_result = result
        return result

    async def refresh(self) -> CycleResult | None:
        """Run a cycle now through the scheduler lock; None if one is already running."""
        ran = await self.scheduler.tick()
        return self.last_result if ran else None

    def start(self) -> None:
        self.scheduler.start()

    async def shutdown(self) -> None:
        """Stop the trigger, then blank and release the display."""
        await self.scheduler.stop()
        try:
            self.display.clear()
            self.display.close()
        except Exception:
            logger.exception("Display teardown failed")
        aclose = getattr(self.evaluator.notifier, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("Meeting indicator shut down")
