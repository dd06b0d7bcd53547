#!/usr/bin/env python3
"""
Run a single status check and print the outcome.

Usage:
    uv run python src/scripts/check_status.py
    uv run python src/scripts/check_status.py --now 2025-11-04T10:00:00+00:00
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import load_settings
from core.errors import ConfigError
from core.logging_setup import configure_logging
from services.indicator import MeetingIndicator


def parse_now(value: str | None) -> datetime | None:
    """Parse --now; naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def main(now_str: str | None = None) -> int:
    """Main entry point."""
    configure_logging()

    try:
        indicator = MeetingIndicator.from_settings(load_settings())
    except ConfigError as e:
        print(f"Invalid configuration: {e}")
        return 2

    try:
        result = await indicator.run_once(parse_now(now_str))
    finally:
        aclose = getattr(indicator.evaluator.notifier, "aclose", None)
        if aclose is not None:
            await aclose()

    print(f"Time:   {result.now.isoformat()}")
    print(f"State:  {result.state.value}")
    print(f"Status: {result.status.value}")
    if result.events_considered:
        print(f"Events: {result.events_considered}")
    if result.error:
        print(f"Error:  {result.error}")
    return 1 if result.failed else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Evaluate meeting status once")
    parser.add_argument(
        "--now",
        help="Evaluate as of this ISO 8601 instant instead of the current time.",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.now)))
