"""AggregationEngine - derived dashboard metrics over annotated tickets."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from govboard.analytics.models import (
    AnalyticsReport,
    DistributionEntry,
    MovementRollbackCount,
    OverallProgress,
    PointsDelivery,
    ProjectProgress,
    RiskBuckets,
    RollbackAudit,
    StatusCount,
    TeamCorrelation,
    TeamWorkload,
)
from govboard.analytics.ratios import density, percentage
from govboard.boards import DEFAULT_REGISTRY, normalize_team_name
from govboard.filters import team_predicate, team_projects
from govboard.records import stage_of
from govboard.stages import CanonicalStage, stage_label

if TYPE_CHECKING:
    from govboard.boards import BoardRegistry
    from govboard.filters import DateRange
    from govboard.records import DevelopmentIncident, Movement, Project, Team, Ticket

logger = logging.getLogger(__name__)

_INCIDENT_TYPE_MARKERS = ("incident", "bug", "defect")
_PLACEHOLDER_ASSIGNEES = frozenset({"unassigned", "none", "", "null", "undefined"})
_DONE_PROJECT_STATUSES = frozenset({"completed", "done", "live"})

SLA_BREACH_DAYS = 14
STALE_DAYS = 7
PROJECT_DISTRIBUTION_LIMIT = 20


def is_incident_type(ticket: Ticket) -> bool:
    """True for issue types mentioning incident, bug or defect."""
    issue_type = (ticket.issue_type or "").lower()
    return any(marker in issue_type for marker in _INCIDENT_TYPE_MARKERS)


def is_done(ticket: Ticket) -> bool:
    return stage_of(ticket) == CanonicalStage.LIVE


def _points(tickets: Iterable[Ticket]) -> float:
    return sum(t.delivery_points for t in tickets)


class AggregationEngine:
    """Computes dashboard metrics from already-filtered collections.

    Every method is a pure function of its arguments: nothing is cached and
    inputs are never mutated. Zero denominators produce 0.
    """

    def __init__(self, registry: BoardRegistry = DEFAULT_REGISTRY) -> None:
        """Initialize the engine.

        Args:
            registry: Board registry used for team name and key-prefix lookups.
        """
        self.registry = registry

    # Team membership

    def team_tickets(
        self, team: Team, tickets: Iterable[Ticket], projects: Iterable[Project]
    ) -> list[Ticket]:
        """Tickets belonging to a team."""
        belongs = team_predicate(team, projects, self.registry)
        return [t for t in tickets if belongs(t)]

    def team_incidents(
        self, team: Team, incidents: Iterable[DevelopmentIncident]
    ) -> list[DevelopmentIncident]:
        """Development incidents raised against a team, matched by team name."""
        canonical = self.registry.canonical_name(team.name) or normalize_team_name(team.name)
        return [
            i
            for i in incidents
            if i.team and (i.team == team.name or normalize_team_name(i.team) == canonical)
        ]

    # Workload and progress

    def workload(
        self,
        team: Team,
        tickets: Iterable[Ticket],
        projects: Iterable[Project] = (),
        incidents: Iterable[DevelopmentIncident] = (),
    ) -> TeamWorkload:
        """Active / completed / total counts for one team.

        Tickets and development incidents are separate collections, so no
        item is counted in both.
        """
        own_tickets = self.team_tickets(team, tickets, projects)
        own_incidents = self.team_incidents(team, incidents)
        completed = sum(1 for t in own_tickets if is_done(t)) + sum(
            1 for i in own_incidents if i.is_resolved
        )
        total = len(own_tickets) + len(own_incidents)
        return TeamWorkload(
            team=team.name, active=total - completed, completed=completed, total=total
        )

    def workloads(
        self,
        teams: Iterable[Team],
        tickets: Sequence[Ticket],
        projects: Sequence[Project] = (),
        incidents: Sequence[DevelopmentIncident] = (),
    ) -> list[TeamWorkload]:
        """Workload per team, busiest first."""
        rows = [self.workload(team, tickets, projects, incidents) for team in teams]
        return sorted(rows, key=lambda w: w.total, reverse=True)

    def overall_progress(
        self,
        tickets: Iterable[Ticket],
        incidents: Iterable[DevelopmentIncident] = (),
    ) -> OverallProgress:
        """Completion across tickets and development incidents."""
        ticket_list = list(tickets)
        incident_list = list(incidents)
        total = len(ticket_list) + len(incident_list)
        completed = sum(1 for t in ticket_list if is_done(t)) + sum(
            1 for i in incident_list if i.is_resolved
        )
        return OverallProgress(
            total=total, completed=completed, percentage=percentage(completed, total)
        )

    def points_delivery(
        self,
        team: Team,
        tickets: Iterable[Ticket],
        projects: Sequence[Project] = (),
        date_filtered: bool = False,
    ) -> PointsDelivery:
        """Planned vs completed points for one team.

        Project-level aggregates are used unless a date filter is active or
        the aggregate is exactly zero; then ticket-level sums are used. The
        choice is made separately for planned and completed.
        """
        owned = team_projects(team, projects)
        own_tickets = self.team_tickets(team, tickets, projects)

        project_planned = sum(p.planned_points or 0.0 for p in owned)
        project_completed = sum(p.completed_points or 0.0 for p in owned)
        ticket_planned = _points(own_tickets)
        ticket_completed = _points(t for t in own_tickets if is_done(t))

        use_tickets_planned = date_filtered or project_planned == 0
        use_tickets_completed = date_filtered or project_completed == 0
        planned = ticket_planned if use_tickets_planned else project_planned
        completed = ticket_completed if use_tickets_completed else project_completed

        return PointsDelivery(
            team=team.name,
            planned=planned,
            completed=completed,
            percentage=percentage(completed, planned),
            from_tickets=use_tickets_planned and use_tickets_completed,
        )

    def project_progress(
        self,
        project: Project,
        tickets: Iterable[Ticket],
        now: datetime | None = None,
    ) -> ProjectProgress:
        """Completion, SLA and staleness figures for one project.

        An open ticket breaches SLA when created more than 14 days ago and is
        stale when its last activity is more than 7 days old. Tickets with no
        usable timestamp are left out of those counts and of the date range.
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        own = [t for t in tickets if t.project_id == project.id]
        done = [t for t in own if is_done(t)]

        sla_breaches = 0
        stale = 0
        for ticket in own:
            if stage_of(ticket) >= CanonicalStage.LIVE:
                continue
            if ticket.created_at and now - ticket.created_at > timedelta(days=SLA_BREACH_DAYS):
                sla_breaches += 1
            last = ticket.last_activity
            if last and now - last > timedelta(days=STALE_DAYS):
                stale += 1

        created = [t.created_at for t in own if t.created_at is not None]
        activity = [t.last_activity for t in own if t.last_activity is not None]
        total_points = _points(own)
        completed_points = _points(done)

        return ProjectProgress(
            project_id=project.id,
            name=project.name or project.jira_key or project.id,
            total_tickets=len(own),
            completed_tickets=len(done),
            ticket_percentage=percentage(len(done), len(own)),
            total_points=total_points,
            completed_points=completed_points,
            points_percentage=percentage(completed_points, total_points),
            sla_breaches=sla_breaches,
            stale_tickets=stale,
            earliest_created=min(created) if created else None,
            latest_activity=max(activity) if activity else None,
        )

    # Distributions

    def status_histogram(self, tickets: Iterable[Ticket]) -> list[StatusCount]:
        """Tickets per canonical-stage label, most frequent first."""
        counts = Counter(stage_label(stage_of(t)) for t in tickets)
        return [StatusCount(label=label, count=n) for label, n in counts.most_common()]

    def correlation(
        self,
        team: Team,
        tickets: Iterable[Ticket],
        projects: Iterable[Project] = (),
        incidents: Iterable[DevelopmentIncident] = (),
    ) -> TeamCorrelation:
        """Incidents against development effort for one team."""
        own_tickets = self.team_tickets(team, tickets, projects)
        typed_incidents = sum(1 for t in own_tickets if is_incident_type(t))
        incident_count = typed_incidents + len(self.team_incidents(team, incidents))
        dev_count = len(own_tickets) - typed_incidents
        return TeamCorrelation(
            team=team.name,
            incidents=incident_count,
            development=dev_count,
            incident_density=density(incident_count, dev_count),
        )

    def risk_buckets(self, tickets: Iterable[Ticket]) -> RiskBuckets:
        """Bucket backlog (To Do) tickets by risk; other stages are ignored."""
        buckets = RiskBuckets()
        for ticket in tickets:
            if stage_of(ticket) != CanonicalStage.TO_DO:
                continue
            if ticket.risk >= 2:
                buckets.high += 1
            elif ticket.risk == 1:
                buckets.medium += 1
            else:
                buckets.low += 1
        return buckets

    def movement_rollback_counts(
        self,
        team: Team,
        tickets: Iterable[Ticket],
        projects: Iterable[Project],
        movements: Iterable[Movement],
        rollbacks: Iterable[Movement],
    ) -> MovementRollbackCount:
        """Movements and rollbacks recorded against a team's tickets."""
        ticket_ids = {t.id for t in self.team_tickets(team, tickets, projects)}
        return MovementRollbackCount(
            team=team.name,
            movements=sum(1 for m in movements if m.ticket_id in ticket_ids),
            rollbacks=sum(1 for r in rollbacks if r.ticket_id in ticket_ids),
        )

    def agent_distribution(self, tickets: Iterable[Ticket]) -> list[DistributionEntry]:
        """Development tickets per assignee, placeholder assignees dropped."""
        counts: Counter[str] = Counter()
        for ticket in tickets:
            if is_incident_type(ticket):
                continue
            agent = (ticket.assigned_to or "").strip()
            if agent.lower() in _PLACEHOLDER_ASSIGNEES:
                continue
            counts[agent] += 1
        return [DistributionEntry(name=name, value=n) for name, n in counts.most_common()]

    def project_distribution(
        self,
        projects: Iterable[Project],
        tickets: Iterable[Ticket],
        limit: int | None = PROJECT_DISTRIBUTION_LIMIT,
    ) -> list[DistributionEntry]:
        """Tickets per project (by id or epic key), empty projects dropped."""
        by_id: Counter[str | None] = Counter()
        by_key: Counter[str | None] = Counter()
        by_both: Counter[tuple[str | None, str | None]] = Counter()
        for ticket in tickets:
            by_id[ticket.project_id] += 1
            if ticket.epic_key is not None:
                by_key[ticket.epic_key] += 1
                by_both[ticket.project_id, ticket.epic_key] += 1

        rows = []
        for project in projects:
            count = by_id[project.id]
            if project.jira_key is not None:
                # tickets matching on both id and key count once
                count += by_key[project.jira_key] - by_both[project.id, project.jira_key]
            if count:
                name = project.name or project.jira_key or project.id
                rows.append(DistributionEntry(name=name, value=count))
        rows.sort(key=lambda e: e.value, reverse=True)
        return rows if limit is None else rows[:limit]

    def rollback_audit(self, movements: Iterable[Movement]) -> RollbackAudit:
        """Split rollback movements into justified and pending.

        Reporting only; a pending rollback is never rejected.
        """
        audit = RollbackAudit()
        for movement in movements:
            if not movement.is_rollback:
                continue
            if movement.is_justified:
                audit.justified.append(movement)
            else:
                audit.pending.append(movement)
        return audit

    # Date-range narrowing

    def active_projects(
        self,
        projects: Iterable[Project],
        tickets: Iterable[Ticket],
        date_filtered: bool,
    ) -> list[Project]:
        """Projects in scope: all of them, or only those touched by tickets while dated."""
        project_list = list(projects)
        if not date_filtered:
            return project_list
        touched = {t.project_id for t in tickets if t.project_id is not None}
        return [p for p in project_list if p.id in touched]

    def active_teams(
        self,
        teams: Iterable[Team],
        projects: Iterable[Project],
        incidents: Iterable[DevelopmentIncident],
        date_filtered: bool,
    ) -> list[Team]:
        """Teams in scope while a date filter narrows the data.

        A team stays when one of the given (already narrowed) projects belongs
        to it, or a development incident names it.
        """
        team_list = list(teams)
        if not date_filtered:
            return team_list
        team_ids = {p.team_id for p in projects if p.team_id is not None}
        incident_teams = {i.team for i in incidents if i.team}
        return [t for t in team_list if t.id in team_ids or t.name in incident_teams]

    def open_project_count(self, projects: Iterable[Project], date_filtered: bool) -> int:
        """Projects counted as active on the dashboard."""
        project_list = list(projects)
        if date_filtered:
            return len(project_list)
        return sum(
            1 for p in project_list if (p.status or "").lower() not in _DONE_PROJECT_STATUSES
        )

    # Report

    def report(
        self,
        teams: Sequence[Team],
        projects: Sequence[Project],
        tickets: Sequence[Ticket],
        incidents: Sequence[DevelopmentIncident] = (),
        movements: Sequence[Movement] = (),
        rollbacks: Sequence[Movement] = (),
        team: Team | None = None,
        date_range: DateRange | None = None,
    ) -> AnalyticsReport:
        """Compute every dashboard aggregation for one snapshot.

        Args:
            teams: All teams.
            projects: All projects.
            tickets: Annotated tickets, already narrowed by date server-side.
            incidents: Development incidents.
            movements: Ticket movements.
            rollbacks: Rollback movements.
            team: Restrict the report to one team.
            date_range: Date range the snapshot was fetched with.

        Returns:
            AnalyticsReport with per-team rows and global distributions.
        """
        date_filtered = date_range is not None and date_range.is_active

        scoped_projects = list(projects)
        scoped_teams = list(teams)
        if team is not None:
            scoped_projects = team_projects(team, projects)
            scoped_teams = [t for t in teams if t.id == team.id] or [team]
        scoped_projects = self.active_projects(scoped_projects, tickets, date_filtered)
        scoped_teams = self.active_teams(scoped_teams, scoped_projects, incidents, date_filtered)

        if team is not None:
            scoped_tickets = self.team_tickets(team, tickets, projects)
            scoped_incidents = self.team_incidents(team, incidents)
        else:
            scoped_tickets = list(tickets)
            scoped_incidents = list(incidents)

        report = AnalyticsReport(
            workload=self.workloads(scoped_teams, tickets, projects, incidents),
            points=[
                self.points_delivery(t, tickets, projects, date_filtered) for t in scoped_teams
            ],
            overall=self.overall_progress(scoped_tickets, scoped_incidents),
            status_histogram=self.status_histogram(scoped_tickets),
            correlation=[self.correlation(t, tickets, projects, incidents) for t in scoped_teams],
            risk=self.risk_buckets(scoped_tickets),
            movements=[
                self.movement_rollback_counts(t, tickets, projects, movements, rollbacks)
                for t in scoped_teams
            ],
            agents=self.agent_distribution(scoped_tickets),
            projects=self.project_distribution(
                scoped_projects,
                scoped_tickets,
                limit=None if team is not None else PROJECT_DISTRIBUTION_LIMIT,
            ),
            active_projects=self.open_project_count(scoped_projects, date_filtered),
        )
        logger.info(
            "Computed analytics for %d team(s), %d ticket(s)",
            len(scoped_teams),
            len(scoped_tickets),
        )
        return report
