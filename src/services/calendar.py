"""
Calendar event fetching from MS Graph.

Exceptions from the SDK are mapped to the indicator's error taxonomy here so
the status evaluator only ever sees AuthError, NetworkError or ApiError.
"""

import asyncio
import logging

import httpx
from azure.core.exceptions import ClientAuthenticationError
from kiota_abstractions.api_error import APIError
from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)

from core.config import GRAPH_SCOPE, Settings
from core.errors import ApiError, AuthError, ConfigError, MalformedDataError, NetworkError
from core.graph_client import get_credential, get_graph_client
from core.validation import parse_event_timestamp
from models.events import MeetingEvent, TimeWindow

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


async def resolve_user_id(graph, user_id: str = "") -> str:
    """Configured user, else the first user visible to the application."""
    if user_id:
        return user_id

    users_response = await graph.users.get()
    users = users_response.value if users_response and users_response.value else []
    if not users or not users[0].id:
        raise ApiError("User lookup returned no users")
    return users[0].id


def graph_timestamp(value) -> str:
    """Format a UTC datetime the way calendarView expects."""
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def map_graph_error(error: Exception) -> Exception:
    """Translate SDK/transport exceptions into the indicator taxonomy."""
    if isinstance(error, (AuthError, NetworkError, ApiError)):
        return error
    if isinstance(error, ClientAuthenticationError):
        return AuthError(str(error.message or error))
    if isinstance(error, APIError):
        odata = getattr(error, "error", None)
        code = getattr(odata, "code", None)
        message = getattr(odata, "message", None) or str(error) or "Graph request failed"
        return ApiError(message, status_code=error.response_status_code, code=code)
    if isinstance(error, (httpx.TransportError, TimeoutError, OSError)):
        return NetworkError(str(error) or type(error).__name__)
    return error


class GraphAuthProvider:
    """Acquires bearer tokens for MS Graph via azure-identity."""

    def __init__(self, credential=None, scope: str = GRAPH_SCOPE):
        self.credential = credential or get_credential()
        self.scope = scope

    async def get_token(self) -> str:
        """
        Return an access token string.

        Raises:
            AuthError: if the credential cannot produce a token
        """
        try:
            access_token = await asyncio.to_thread(self.credential.get_token, self.scope)
        except ClientAuthenticationError as e:
            raise AuthError(f"Token acquisition failed: {e.message or e}")
        return access_token.token


class GraphCalendarFetcher:
    """Reads the configured Outlook calendar over a time window."""

    def __init__(self, calendar_id: str, user_id: str = "", graph=None, auth=None):
        if not calendar_id:
            raise ConfigError("OUTLOOK_CALENDAR_ID is not set")
        self.calendar_id = calendar_id
        self.user_id = user_id
        self.graph = graph or get_graph_client()
        self.auth = auth or GraphAuthProvider()

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphCalendarFetcher":
        return cls(calendar_id=settings.calendar_id, user_id=settings.user_id)

    async def resolve_user_id(self) -> str:
        return await resolve_user_id(self.graph, self.user_id)

    async def fetch(self, window: TimeWindow) -> list[MeetingEvent]:
        """
        Fetch events overlapping window.

        Raises:
            AuthError, NetworkError, ApiError
        """
        try:
            # Surfaces credential problems as AuthError; the SDK reuses the cached token
            await self.auth.get_token()
            user_id = await self.resolve_user_id()
            raw_events = await self._calendar_view(user_id, window)
        except Exception as e:
            mapped = map_graph_error(e)
            if mapped is e:
                raise
            raise mapped from e

        events = []
        for raw in raw_events:
            event = parse_event(raw)
            if event is not None:
                events.append(event)
        logger.debug("Fetched %d event(s), kept %d", len(raw_events), len(events))
        return events

    async def _calendar_view(self, user_id: str, window: TimeWindow) -> list:
        query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
            start_date_time=graph_timestamp(window.start),
            end_date_time=graph_timestamp(window.end),
            select=["id", "subject", "start", "end"],
            top=PAGE_SIZE,
        )
        config = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetRequestConfiguration(
            query_parameters=query_params
        )
        config.headers.add("Prefer", 'outlook.timezone="UTC"')
        # Next links carry the query already; only the timezone header is needed
        page_config = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetRequestConfiguration()
        page_config.headers.add("Prefer", 'outlook.timezone="UTC"')

        builder = (
            self.graph.users.by_user_id(user_id)
            .calendars.by_calendar_id(self.calendar_id)
            .calendar_view
        )
        response = await builder.get(request_configuration=config)

        raw_events = []
        while response is not None:
            raw_events.extend(response.value or [])
            next_link = response.odata_next_link
            if not next_link:
                break
            response = await builder.with_url(next_link).get(request_configuration=page_config)
        return raw_events


def parse_event(event) -> MeetingEvent | None:
    """Parse MS Graph event into our format; None when timestamps are unusable."""
    try:
        if not event.start or not event.end:
            raise MalformedDataError("Event has no start or end")
        start = parse_event_timestamp(event.start.date_time, event.start.time_zone)
        end = parse_event_timestamp(event.end.date_time, event.end.time_zone)
    except MalformedDataError as e:
        logger.warning("Discarding event %r: %s", getattr(event, "subject", None), e)
        return None

    return MeetingEvent(
        start=start,
        end=end,
        subject=event.subject or "",
        event_id=event.id,
    )
