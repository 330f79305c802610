"""TrackerClient - reads teams, projects, tickets and movements from the backend API."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any

import httpx

from govboard.fetch.exceptions import FetchError
from govboard.logging import sanitize_for_log, truncate_output
from govboard.records import (
    DevelopmentIncident,
    Movement,
    Project,
    Team,
    Ticket,
    parse_incidents,
    parse_movements,
    parse_projects,
    parse_teams,
    parse_tickets,
)

if TYPE_CHECKING:
    from govboard.config import Settings
    from govboard.filters import DateRange

logger = logging.getLogger("govboard.fetch")

# Endpoint paths relative to the API base URL
PATHS = {
    "teams": "/teams",
    "projects": "/projects",
    "tickets": "/tickets",
    "incidents": "/incidents/l4",
    "movements": "/tickets/movements",
    "rollbacks": "/tickets/rollbacks",
}


def _iso(value: date | datetime) -> str:
    return value.isoformat()


def date_range_params(date_range: DateRange | None) -> dict[str, str]:
    """Query parameters for a date range; empty bounds are omitted."""
    if date_range is None:
        return {}
    params: dict[str, str] = {}
    if date_range.start is not None:
        params["startDate"] = _iso(date_range.start)
    if date_range.end is not None:
        params["endDate"] = _iso(date_range.end)
    return params


class TrackerClient:
    """Async client for the ticket-tracker REST API.

    Every getter returns parsed records. Lists may arrive bare or wrapped in
    an ``{"items": [...]}`` envelope.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend API base URL, e.g. "http://localhost:5001/api".
            token: Optional bearer token.
            timeout: Per-request timeout in seconds.
            transport: Custom transport (tests use httpx.MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TrackerClient:
        return cls(
            base_url=settings.api_base_url,
            token=settings.api_token,
            timeout=settings.http_timeout,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> TrackerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a path and decode the JSON body.

        Raises:
            FetchError: On transport errors, HTTP status >= 400 or invalid JSON.
        """
        try:
            response = await self.client.get(path, params=params or None)
        except httpx.HTTPError as e:
            logger.error("Request to %s failed: %s", path, e)
            raise FetchError(f"Request to {path} failed: {e}", path=path) from e

        if response.status_code >= 400:
            body = truncate_output(sanitize_for_log(response.text))
            logger.error("GET %s returned %d: %s", path, response.status_code, body)
            raise FetchError(
                f"GET {path} returned {response.status_code}",
                path=path,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("GET %s returned invalid JSON", path)
            raise FetchError(f"GET {path} returned invalid JSON", path=path) from e

    async def get_teams(self) -> list[Team]:
        return parse_teams(await self._get(PATHS["teams"]))

    async def get_projects(self) -> list[Project]:
        return parse_projects(await self._get(PATHS["projects"]))

    async def get_tickets(self, date_range: DateRange | None = None) -> list[Ticket]:
        """Tickets, optionally narrowed server-side by date."""
        return parse_tickets(await self._get(PATHS["tickets"], date_range_params(date_range)))

    async def get_development_incidents(
        self, date_range: DateRange | None = None
    ) -> list[DevelopmentIncident]:
        """L4 development incidents."""
        payload = await self._get(PATHS["incidents"], date_range_params(date_range))
        return parse_incidents(payload)

    async def get_ticket_movements(self, date_range: DateRange | None = None) -> list[Movement]:
        payload = await self._get(PATHS["movements"], date_range_params(date_range))
        return parse_movements(payload)

    async def get_rollbacks(self, date_range: DateRange | None = None) -> list[Movement]:
        """Rollback movements; every record is flagged as a rollback."""
        payload = await self._get(PATHS["rollbacks"], date_range_params(date_range))
        return [_as_rollback(m) for m in parse_movements(payload)]


def _as_rollback(movement: Movement) -> Movement:
    if movement.is_rollback:
        return movement
    return replace(movement, is_rollback=True)
