"""Unit tests for TrackerClient."""

from datetime import date

import httpx
import pytest

from govboard.config import Settings
from govboard.fetch import FetchError, TrackerClient, date_range_params
from govboard.filters import DateRange

BASE_URL = "http://tracker.test/api"


@pytest.mark.unit
class TestDateRangeParams:
    def test_none(self) -> None:
        assert date_range_params(None) == {}

    def test_both_bounds(self) -> None:
        params = date_range_params(DateRange(date(2024, 3, 1), date(2024, 3, 31)))
        assert params == {"startDate": "2024-03-01", "endDate": "2024-03-31"}

    def test_open_end_omitted(self) -> None:
        assert date_range_params(DateRange(start=date(2024, 3, 1))) == {"startDate": "2024-03-01"}


@pytest.mark.unit
class TestTrackerClient:
    """Tests for TrackerClient getters."""

    @pytest.mark.asyncio
    async def test_parses_bare_list(self, tracker) -> None:
        async with tracker:
            teams = await tracker.get_teams()

        assert [(t.id, t.name, t.prefix) for t in teams] == [
            ("1", "Collections", "SKP"),
            ("2", "Core Switching", "CASP"),
        ]

    @pytest.mark.asyncio
    async def test_parses_items_envelope(self, tracker) -> None:
        async with tracker:
            projects = await tracker.get_projects()

        assert [p.jira_key for p in projects] == ["DD", "SWU"]
        assert projects[0].team_id == "1"

    @pytest.mark.asyncio
    async def test_ticket_fields_tolerate_casing(self, tracker) -> None:
        async with tracker:
            tickets = await tracker.get_tickets()

        assert tickets[2].status == "QA Test"
        assert tickets[0].project_id == "10"

    @pytest.mark.asyncio
    async def test_sends_date_params(self, make_transport, tracker_payloads) -> None:
        seen: list[httpx.Request] = []
        client = TrackerClient(BASE_URL, transport=make_transport(tracker_payloads, seen=seen))
        async with client:
            await client.get_tickets(DateRange(date(2024, 3, 1), date(2024, 3, 31)))

        params = seen[0].url.params
        assert params["startDate"] == "2024-03-01"
        assert params["endDate"] == "2024-03-31"

    @pytest.mark.asyncio
    async def test_no_params_without_range(self, make_transport, tracker_payloads) -> None:
        seen: list[httpx.Request] = []
        client = TrackerClient(BASE_URL, transport=make_transport(tracker_payloads, seen=seen))
        async with client:
            await client.get_teams()

        assert seen[0].url.path == "/api/teams"
        assert not seen[0].url.params

    @pytest.mark.asyncio
    async def test_bearer_token(self, make_transport, tracker_payloads) -> None:
        seen: list[httpx.Request] = []
        client = TrackerClient(
            BASE_URL, token="s3cret", transport=make_transport(tracker_payloads, seen=seen)
        )
        async with client:
            await client.get_teams()

        assert seen[0].headers["Authorization"] == "Bearer s3cret"
        assert seen[0].headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_token(self, make_transport, tracker_payloads) -> None:
        seen: list[httpx.Request] = []
        client = TrackerClient(BASE_URL, transport=make_transport(tracker_payloads, seen=seen))
        async with client:
            await client.get_teams()

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_rollbacks_are_flagged(self, tracker) -> None:
        async with tracker:
            rollbacks = await tracker.get_rollbacks()

        assert rollbacks[0].is_rollback
        assert rollbacks[0].is_justified

    @pytest.mark.asyncio
    async def test_incidents(self, tracker) -> None:
        async with tracker:
            incidents = await tracker.get_development_incidents()

        assert incidents[0].team == "Collections"
        assert incidents[0].is_resolved

    @pytest.mark.asyncio
    async def test_server_error_raises(self, make_transport, tracker_payloads) -> None:
        client = TrackerClient(
            BASE_URL, transport=make_transport(tracker_payloads, failing=("/teams",))
        )
        async with client:
            with pytest.raises(FetchError) as exc_info:
                await client.get_teams()

        assert exc_info.value.status_code == 500
        assert exc_info.value.path == "/teams"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = TrackerClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(FetchError, match="failed"):
                await client.get_projects()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        client = TrackerClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(FetchError, match="invalid JSON"):
                await client.get_tickets()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, tracker) -> None:
        await tracker.get_teams()
        await tracker.close()
        await tracker.close()

    def test_from_settings(self) -> None:
        settings = Settings(api_base_url="http://x/api/", api_token="t", http_timeout=5.0)
        client = TrackerClient.from_settings(settings)

        assert client.base_url == "http://x/api"
        assert client.token == "t"
        assert client.timeout == 5.0
