"""Concurrent all-or-nothing loading of a dashboard snapshot."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from govboard.fetch.exceptions import CONNECTIVITY_MESSAGE, FetchError
from govboard.records import annotate_tickets
from govboard.stages import StageResolver

if TYPE_CHECKING:
    from govboard.fetch.client import TrackerClient
    from govboard.filters import DateRange
    from govboard.records import DevelopmentIncident, Movement, Project, Team, Ticket

logger = logging.getLogger("govboard.fetch")


@dataclass
class DashboardSnapshot:
    """Every collection a dashboard view needs, fetched together.

    Attributes:
        tickets: Tickets annotated with canonical stage and priority.
        resolver: Resolver used for annotation, carrying fallback counts.
    """

    teams: list[Team] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    tickets: list[Ticket] = field(default_factory=list)
    incidents: list[DevelopmentIncident] = field(default_factory=list)
    movements: list[Movement] = field(default_factory=list)
    rollbacks: list[Movement] = field(default_factory=list)
    date_range: DateRange | None = None
    resolver: StageResolver = field(default_factory=StageResolver)

    def team(self, team_id: str) -> Team | None:
        return next((t for t in self.teams if t.id == team_id), None)

    def project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)


async def load_snapshot(
    client: TrackerClient,
    date_range: DateRange | None = None,
) -> DashboardSnapshot:
    """Fetch all collections concurrently.

    Either every request succeeds or none of the results are used.

    Raises:
        FetchError: With CONNECTIVITY_MESSAGE when any request fails.
    """
    try:
        teams, projects, tickets, incidents, movements, rollbacks = await asyncio.gather(
            client.get_teams(),
            client.get_projects(),
            client.get_tickets(date_range),
            client.get_development_incidents(date_range),
            client.get_ticket_movements(date_range),
            client.get_rollbacks(date_range),
        )
    except FetchError as e:
        logger.warning("Snapshot load failed (%s), discarding partial results", e)
        raise FetchError(CONNECTIVITY_MESSAGE, path=e.path, status_code=e.status_code) from e

    resolver = StageResolver()
    snapshot = DashboardSnapshot(
        teams=teams,
        projects=projects,
        tickets=annotate_tickets(tickets, resolver),
        incidents=incidents,
        movements=movements,
        rollbacks=rollbacks,
        date_range=date_range,
        resolver=resolver,
    )
    logger.info(
        "Loaded snapshot: %d teams, %d projects, %d tickets, %d incidents",
        len(teams),
        len(projects),
        len(tickets),
        len(incidents),
    )
    return snapshot
