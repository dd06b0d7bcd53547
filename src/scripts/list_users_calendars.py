#!/usr/bin/env python3
"""
Show which mailbox and calendar the indicator will read.

Lists the users visible to the app registration with their calendars, marks
the user the indicator resolves (OUTLOOK_USER_ID, else the first user) and
checks that OUTLOOK_CALENDAR_ID belongs to that user. Exits 1 when it does
not, so the check can gate a deployment.

Usage:
    uv run python src/scripts/list_users_calendars.py
"""

import asyncio
import sys
from dataclasses import dataclass, field
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import Settings, load_settings
from core.errors import ConfigError
from core.graph_client import get_graph_client
from services.calendar import map_graph_error, resolve_user_id


@dataclass
class MailboxCalendars:
    user_id: str
    name: str
    email: str
    calendars: list[tuple[str, str]] = field(default_factory=list)
    error: str | None = None
    is_indicator_user: bool = False


async def collect_calendars(graph, settings: Settings) -> tuple[list[MailboxCalendars], str]:
    """Return every visible user with their calendars, plus the indicator's user ID."""
    indicator_user = await resolve_user_id(graph, settings.user_id)

    users_response = await graph.users.get()
    users = users_response.value if users_response and users_response.value else []

    mailboxes = []
    for user in users:
        mailbox = MailboxCalendars(
            user_id=user.id,
            name=user.display_name or "",
            email=user.user_principal_name or "",
            is_indicator_user=user.id == indicator_user,
        )
        try:
            calendars_response = await graph.users.by_user_id(user.id).calendars.get()
            calendars = calendars_response.value if calendars_response.value else []
            mailbox.calendars = [(cal.name or "", cal.id) for cal in calendars]
        except Exception as e:
            mailbox.error = str(map_graph_error(e))
        mailboxes.append(mailbox)

    return mailboxes, indicator_user


def calendar_configured(mailboxes: list[MailboxCalendars], calendar_id: str) -> bool:
    """True when calendar_id is one of the indicator user's calendars."""
    return any(
        cal_id == calendar_id
        for mailbox in mailboxes
        if mailbox.is_indicator_user
        for _, cal_id in mailbox.calendars
    )


def print_report(mailboxes: list[MailboxCalendars], indicator_user: str, calendar_id: str) -> None:
    print(f"Found {len(mailboxes)} users\n")
    print("=" * 80)

    for mailbox in mailboxes:
        marker = "  <- indicator user" if mailbox.is_indicator_user else ""
        print(f"\nUser: {mailbox.name}{marker}")
        print(f"  Email: {mailbox.email}")
        print(f"  ID: {mailbox.user_id}")

        if mailbox.error:
            print(f"  Error fetching calendars: {mailbox.error}")
        elif mailbox.calendars:
            print(f"  Calendars ({len(mailbox.calendars)}):")
            for name, cal_id in mailbox.calendars:
                flag = "  <- OUTLOOK_CALENDAR_ID" if cal_id == calendar_id else ""
                print(f"    - {name}{flag}")
                print(f"      ID: {cal_id}")
        else:
            print("  Calendars: None")

        print("-" * 80)

    if not any(mailbox.is_indicator_user for mailbox in mailboxes):
        print(f"\nIndicator user {indicator_user} (OUTLOOK_USER_ID) is not visible to this app")


async def main() -> int:
    """List users and calendars, then check the configured calendar."""
    try:
        settings = load_settings()
        graph = get_graph_client()
    except ConfigError as e:
        print(f"Invalid configuration: {e}")
        return 2

    print("Fetching users from MS365...\n")
    mailboxes, indicator_user = await collect_calendars(graph, settings)
    print_report(mailboxes, indicator_user, settings.calendar_id)

    if not settings.calendar_id:
        print("\nOUTLOOK_CALENDAR_ID is not set; copy a calendar ID from the indicator user above")
        return 1
    if not calendar_configured(mailboxes, settings.calendar_id):
        print("\nOUTLOOK_CALENDAR_ID is not a calendar of the indicator user")
        return 1

    print("\nConfiguration OK")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
