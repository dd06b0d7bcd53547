"""Tests for the MS Graph calendar adapter."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from azure.core.exceptions import ClientAuthenticationError
from msgraph.generated.models.o_data_errors.main_error import MainError
from msgraph.generated.models.o_data_errors.o_data_error import ODataError

from core.errors import ApiError, AuthError, ConfigError, NetworkError
from core.overlap import is_active
from fixtures.generate_events import make_graph_event, make_random_events
from models.events import TimeWindow
from services.calendar import GraphAuthProvider, GraphCalendarFetcher, parse_event

NOW = datetime(2025, 11, 4, 10, 0, tzinfo=timezone.utc)
WINDOW = TimeWindow.lookahead(NOW, 30)


def page(events, next_link=None):
    return SimpleNamespace(value=events, odata_next_link=next_link)


@pytest.fixture
def auth():
    return SimpleNamespace(get_token=AsyncMock(return_value="token"))


@pytest.fixture
def graph():
    graph = MagicMock()
    graph.users.get = AsyncMock(return_value=SimpleNamespace(value=[SimpleNamespace(id="user-1")]))
    calendar_view = graph.users.by_user_id.return_value.calendars.by_calendar_id.return_value.calendar_view
    calendar_view.get = AsyncMock(return_value=page([]))
    return graph


def calendar_view(graph):
    return graph.users.by_user_id.return_value.calendars.by_calendar_id.return_value.calendar_view


# =============================================================================
# EVENT PARSING
# =============================================================================


def test_parse_graph_event():
    raw = make_graph_event("2025-11-04T09:50:00.0000000", "2025-11-04T10:05:00.0000000", "Standup")

    event = parse_event(raw)

    assert event.start == datetime(2025, 11, 4, 9, 50, tzinfo=timezone.utc)
    assert event.end == datetime(2025, 11, 4, 10, 5, tzinfo=timezone.utc)
    assert event.subject == "Standup"
    assert event.event_id == raw.id


def test_parse_event_in_named_timezone():
    raw = make_graph_event(
        "2025-11-04T10:50:00.0000000", "2025-11-04T11:05:00.0000000", time_zone="Europe/Berlin"
    )

    event = parse_event(raw)

    assert event.start == datetime(2025, 11, 4, 9, 50, tzinfo=timezone.utc)


def test_parse_event_with_offset():
    raw = make_graph_event("2025-11-04T09:50:00Z", "2025-11-04T05:05:00-05:00")

    event = parse_event(raw)

    assert event.end == datetime(2025, 11, 4, 10, 5, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "start,end,time_zone",
    [
        ("not a date", "2025-11-04T10:05:00.0000000", "UTC"),
        ("2025-11-04T09:50:00.0000000", None, "UTC"),
        ("2025-11-04T09:50:00.0000000", "2025-11-04T10:05:00.0000000", "Mars Standard Time"),
    ],
)
def test_malformed_events_are_discarded(start, end, time_zone):
    assert parse_event(make_graph_event(start, end, time_zone=time_zone)) is None


def test_event_without_start_is_discarded():
    raw = make_graph_event(NOW, NOW + timedelta(minutes=30))
    raw.start = None

    assert parse_event(raw) is None


def test_random_events_parse_to_utc():
    for raw in make_random_events(NOW, count=20):
        event = parse_event(raw)
        assert event.start.tzinfo == timezone.utc
        assert event.start < event.end


# =============================================================================
# FETCHING
# =============================================================================


def test_calendar_id_required(graph, auth):
    with pytest.raises(ConfigError):
        GraphCalendarFetcher(calendar_id="", graph=graph, auth=auth)


@pytest.mark.asyncio
async def test_fetch_queries_calendar_view(graph, auth):
    calendar_view(graph).get.return_value = page(
        [make_graph_event(NOW - timedelta(minutes=10), NOW + timedelta(minutes=5), "Standup")]
    )
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    events = await fetcher.fetch(WINDOW)

    assert [e.subject for e in events] == ["Standup"]
    assert is_active(NOW, events) is True
    auth.get_token.assert_awaited_once()
    graph.users.by_user_id.assert_called_with("user-1")
    graph.users.by_user_id.return_value.calendars.by_calendar_id.assert_called_with("cal-1")

    config = calendar_view(graph).get.call_args.kwargs["request_configuration"]
    assert config.query_parameters.start_date_time == "2025-11-04T10:00:00Z"
    assert config.query_parameters.end_date_time == "2025-11-04T10:30:00Z"


@pytest.mark.asyncio
async def test_fetch_follows_next_link(graph, auth):
    view = calendar_view(graph)
    view.get.return_value = page([make_graph_event(NOW, NOW + timedelta(minutes=5))], "https://next")
    view.with_url.return_value.get = AsyncMock(
        return_value=page([make_graph_event(NOW, NOW + timedelta(minutes=10))])
    )
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    events = await fetcher.fetch(WINDOW)

    assert len(events) == 2
    view.with_url.assert_called_once_with("https://next")


@pytest.mark.asyncio
async def test_fetch_drops_malformed_events(graph, auth):
    calendar_view(graph).get.return_value = page(
        [
            make_graph_event("garbage", "2025-11-04T10:05:00.0000000"),
            make_graph_event(NOW, NOW + timedelta(minutes=10)),
        ]
    )
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    events = await fetcher.fetch(WINDOW)

    assert len(events) == 1


@pytest.mark.asyncio
async def test_configured_user_skips_lookup(graph, auth):
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", user_id="me@example.com", graph=graph, auth=auth)

    await fetcher.fetch(WINDOW)

    graph.users.get.assert_not_awaited()
    graph.users.by_user_id.assert_called_with("me@example.com")


@pytest.mark.asyncio
async def test_no_users_is_api_error(graph, auth):
    graph.users.get.return_value = SimpleNamespace(value=[])
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    with pytest.raises(ApiError):
        await fetcher.fetch(WINDOW)


@pytest.mark.asyncio
async def test_odata_error_maps_to_api_error(graph, auth):
    error = ODataError(error=MainError(code="ErrorItemNotFound", message="Calendar not found"))
    error.response_status_code = 404
    calendar_view(graph).get.side_effect = error
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    with pytest.raises(ApiError) as exc_info:
        await fetcher.fetch(WINDOW)

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "ErrorItemNotFound"


@pytest.mark.asyncio
async def test_transport_error_maps_to_network_error(graph, auth):
    graph.users.get.side_effect = httpx.ConnectError("connection refused")
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    with pytest.raises(NetworkError):
        await fetcher.fetch(WINDOW)


@pytest.mark.asyncio
async def test_sdk_auth_failure_maps_to_auth_error(graph, auth):
    calendar_view(graph).get.side_effect = ClientAuthenticationError(message="token expired")
    fetcher = GraphCalendarFetcher(calendar_id="cal-1", graph=graph, auth=auth)

    with pytest.raises(AuthError):
        await fetcher.fetch(WINDOW)


# =============================================================================
# TOKENS
# =============================================================================


@pytest.mark.asyncio
async def test_auth_provider_returns_token():
    credential = MagicMock()
    credential.get_token.return_value = SimpleNamespace(token="abc", expires_on=0)

    token = await GraphAuthProvider(credential=credential).get_token()

    assert token == "abc"
    credential.get_token.assert_called_once_with("https://graph.microsoft.com/.default")


@pytest.mark.asyncio
async def test_auth_provider_failure_is_auth_error():
    credential = MagicMock()
    credential.get_token.side_effect = ClientAuthenticationError(message="AADSTS7000215: Invalid client secret")

    with pytest.raises(AuthError, match="AADSTS7000215"):
        await GraphAuthProvider(credential=credential).get_token()
