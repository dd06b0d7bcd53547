#!/usr/bin/env python3
"""
Run the meeting indicator daemon.

Checks the Outlook calendar on the configured cadence and updates the
display. Ctrl+C / SIGTERM clears the display before exiting.

Usage:
    uv run python src/scripts/run_indicator.py
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import load_settings
from core.errors import ConfigError
from core.logging_setup import configure_logging
from services.indicator import MeetingIndicator

logger = logging.getLogger("indicator")


async def main() -> int:
    """Main entry point."""
    configure_logging()

    try:
        indicator = MeetingIndicator.from_settings(load_settings())
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutting down...")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    indicator.start()
    await shutdown_event.wait()
    await indicator.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
