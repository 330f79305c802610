"""Unit tests for AggregationEngine."""

import math
from datetime import UTC, datetime, timedelta

import pytest

from govboard.analytics import AggregationEngine, is_incident_type
from govboard.filters import DateRange
from govboard.records import DevelopmentIncident, Movement, Project, Team

NOW = datetime(2024, 6, 30, 12, tzinfo=UTC)


@pytest.fixture
def engine() -> AggregationEngine:
    return AggregationEngine()


@pytest.mark.unit
class TestWorkload:
    """Tests for workload and overall progress."""

    def test_counts_tickets_and_incidents(
        self, engine, make_ticket, collections_team, projects
    ) -> None:
        tickets = [
            make_ticket(project_id="p1", status="Done"),
            make_ticket(project_id="p1", status="QA"),
            make_ticket(epic_key="DD", status="Live"),
            make_ticket(project_id="p2", status="Done"),
        ]
        incidents = [
            DevelopmentIncident(id="i1", team="Collections", resolved=True),
            DevelopmentIncident(id="i2", team="Collections"),
            DevelopmentIncident(id="i3", team="Core Switching", resolved=True),
        ]

        workload = engine.workload(collections_team, tickets, projects, incidents)

        assert workload.total == 5
        assert workload.completed == 3
        assert workload.active == 2
        assert workload.progress == 60

    def test_empty_team_is_zero_not_error(self, engine, make_ticket, switching_team) -> None:
        tickets = [
            make_ticket(status="IN_PROGRESS"),
            make_ticket(status=1),
            make_ticket(status="BLOCKED"),
        ]

        workload = engine.workload(switching_team, tickets)

        assert (workload.active, workload.completed, workload.total) == (0, 0, 0)
        assert workload.progress == 0

    def test_workloads_sorted_by_total(
        self, engine, make_ticket, collections_team, switching_team, projects
    ) -> None:
        tickets = [make_ticket(project_id="p2"), make_ticket(project_id="p2")]
        rows = engine.workloads([collections_team, switching_team], tickets, projects)

        assert [r.team for r in rows] == ["Core Switching", "Collections"]

    def test_overall_progress_rounds(self, engine, make_ticket) -> None:
        tickets = [make_ticket(status="Done"), make_ticket(status="QA"), make_ticket(status=0)]
        progress = engine.overall_progress(tickets)

        assert progress.total == 3
        assert progress.completed == 1
        assert progress.percentage == 33

    def test_overall_progress_half_rounds_up(self, engine, make_ticket) -> None:
        tickets = [make_ticket(status=11)] + [make_ticket(status=1) for _ in range(7)]

        assert engine.overall_progress(tickets).percentage == 13

    def test_overall_progress_counts_incidents(self, engine, make_ticket) -> None:
        tickets = [make_ticket(status="QA")]
        incidents = [DevelopmentIncident(id="i1", resolved=True)]

        progress = engine.overall_progress(tickets, incidents)

        assert (progress.total, progress.completed, progress.percentage) == (2, 1, 50)

    def test_overall_progress_empty(self, engine) -> None:
        assert engine.overall_progress([]).percentage == 0


@pytest.mark.unit
class TestPointsDelivery:
    """Tests for points precedence."""

    def test_uses_project_aggregate(self, engine, make_ticket, collections_team, projects) -> None:
        tickets = [make_ticket(project_id="p1", delivery_points=5, status="Done")]
        points = engine.points_delivery(collections_team, tickets, projects)

        assert points.planned == 40
        assert points.completed == 10
        assert points.percentage == 25
        assert not points.from_tickets

    def test_date_filter_prefers_tickets(
        self, engine, make_ticket, collections_team, projects
    ) -> None:
        tickets = [
            make_ticket(project_id="p1", delivery_points=3, status="Done"),
            make_ticket(project_id="p1", delivery_points=5, status="QA"),
        ]
        points = engine.points_delivery(collections_team, tickets, projects, date_filtered=True)

        assert points.planned == 8
        assert points.completed == 3
        assert points.percentage == 38
        assert points.from_tickets

    def test_zero_aggregate_prefers_tickets(self, engine, make_ticket, switching_team) -> None:
        projects = [Project(id="p2", team_id="2", planned_points=0, completed_points=0)]
        tickets = [make_ticket(project_id="p2", delivery_points=4, status="Live")]

        points = engine.points_delivery(switching_team, tickets, projects)

        assert points.planned == 4
        assert points.completed == 4
        assert points.percentage == 100

    def test_zero_completed_only_switches_completed(
        self, engine, make_ticket, switching_team
    ) -> None:
        projects = [Project(id="p2", team_id="2", planned_points=20, completed_points=0)]
        tickets = [make_ticket(project_id="p2", delivery_points=5, status="Live")]

        points = engine.points_delivery(switching_team, tickets, projects)

        assert points.planned == 20
        assert points.completed == 5

    def test_nothing_planned(self, engine, switching_team) -> None:
        assert engine.points_delivery(switching_team, []).percentage == 0


@pytest.mark.unit
class TestHistogramAndRisk:
    """Tests for status histogram and backlog risk buckets."""

    def test_histogram_sorted_descending(self, engine, make_ticket) -> None:
        tickets = [
            make_ticket(status="QA"),
            make_ticket(status="Done"),
            make_ticket(status="QA Test"),
            make_ticket(status="In Test"),
            make_ticket(status="Done"),
            make_ticket(status="Backlog"),
        ]
        histogram = engine.status_histogram(tickets)

        assert [(h.label, h.count) for h in histogram] == [
            ("QA/Test", 3),
            ("Live/Done", 2),
            ("To Do", 1),
        ]

    def test_histogram_pending_label(self, engine, make_ticket) -> None:
        histogram = engine.status_histogram([make_ticket(status=18)])
        assert histogram[0].label == "Pending Classification"

    def test_risk_buckets(self, engine, make_ticket) -> None:
        tickets = [
            make_ticket(status="Backlog", risk=3),
            make_ticket(status="To Do", risk=2),
            make_ticket(status="Open", risk=1),
            make_ticket(status="New", risk=0),
            make_ticket(status="mystery", risk=4),
        ]
        buckets = engine.risk_buckets(tickets)

        assert (buckets.low, buckets.medium, buckets.high) == (1, 1, 3)

    def test_risk_ignores_non_backlog(self, engine, make_ticket) -> None:
        buckets = engine.risk_buckets([make_ticket(status="Review", risk=3)])
        assert (buckets.low, buckets.medium, buckets.high) == (0, 0, 0)


@pytest.mark.unit
class TestCorrelation:
    """Tests for incident density."""

    def test_incident_type_detection(self, make_ticket) -> None:
        assert is_incident_type(make_ticket(issue_type="Production Incident"))
        assert is_incident_type(make_ticket(issue_type="BUG"))
        assert is_incident_type(make_ticket(issue_type="Defect"))
        assert not is_incident_type(make_ticket(issue_type="Story"))
        assert not is_incident_type(make_ticket())

    def test_density(self, engine, make_ticket, collections_team, projects) -> None:
        tickets = [
            make_ticket(project_id="p1", issue_type="Story"),
            make_ticket(project_id="p1", issue_type="Story"),
            make_ticket(project_id="p1", issue_type="Task"),
            make_ticket(project_id="p1", issue_type="Bug"),
        ]
        incidents = [DevelopmentIncident(id="i1", team="Collections")]

        row = engine.correlation(collections_team, tickets, projects, incidents)

        assert row.incidents == 2
        assert row.development == 3
        assert row.incident_density == 6.67

    def test_zero_development_is_zero(
        self, engine, make_ticket, collections_team, projects
    ) -> None:
        tickets = [make_ticket(project_id="p1", issue_type="Bug")]
        row = engine.correlation(collections_team, tickets, projects)

        assert row.development == 0
        assert row.incident_density == 0
        assert not math.isnan(row.incident_density)


@pytest.mark.unit
class TestDistributions:
    """Tests for agent, project and movement distributions."""

    def test_agent_distribution(self, engine, make_ticket) -> None:
        tickets = [
            make_ticket(assigned_to="Ada"),
            make_ticket(assigned_to="Ada"),
            make_ticket(assigned_to="Bo"),
            make_ticket(assigned_to="Ada", issue_type="Bug"),
            make_ticket(assigned_to="Unassigned"),
            make_ticket(assigned_to="null"),
            make_ticket(),
        ]
        rows = engine.agent_distribution(tickets)

        assert [(r.name, r.value) for r in rows] == [("Ada", 2), ("Bo", 1)]

    def test_project_distribution(self, engine, make_ticket, projects) -> None:
        tickets = [
            make_ticket(project_id="p2"),
            make_ticket(project_id="p2"),
            make_ticket(epic_key="DD"),
        ]
        extra = Project(id="p3", name="Empty")
        rows = engine.project_distribution([*projects, extra], tickets)

        assert [(r.name, r.value) for r in rows] == [("Switch Upgrade", 2), ("Direct Debit", 1)]

    def test_ticket_matching_id_and_key_counted_once(self, engine, make_ticket, projects) -> None:
        tickets = [
            make_ticket(project_id="p1", epic_key="DD"),
            make_ticket(project_id="p2", epic_key="DD"),
        ]
        rows = engine.project_distribution(projects, tickets)

        assert {r.name: r.value for r in rows} == {"Direct Debit": 2, "Switch Upgrade": 1}

    def test_project_distribution_reads_tickets_once(self, engine, make_ticket, projects) -> None:
        tickets = iter([make_ticket(project_id="p1"), make_ticket(epic_key="SWU")])
        rows = engine.project_distribution(projects, tickets)

        assert [r.value for r in rows] == [1, 1]

    def test_project_distribution_limit(self, engine, make_ticket) -> None:
        projects = [Project(id=str(i), name=f"P{i}") for i in range(25)]
        tickets = [make_ticket(project_id=str(i)) for i in range(25)]

        assert len(engine.project_distribution(projects, tickets)) == 20
        assert len(engine.project_distribution(projects, tickets, limit=None)) == 25

    def test_movement_rollback_counts(
        self, engine, make_ticket, collections_team, projects
    ) -> None:
        own = make_ticket(id="t-own", project_id="p1")
        foreign = make_ticket(id="t-foreign", project_id="p2")
        movements = [
            Movement(id="m1", ticket_id="t-own"),
            Movement(id="m2", ticket_id="t-own"),
            Movement(id="m3", ticket_id="t-foreign"),
        ]
        rollbacks = [Movement(id="r1", ticket_id="t-own", is_rollback=True)]

        row = engine.movement_rollback_counts(
            collections_team, [own, foreign], projects, movements, rollbacks
        )

        assert (row.movements, row.rollbacks) == (2, 1)

    def test_rollback_audit(self, engine) -> None:
        movements = [
            Movement(id="1", is_rollback=True, justification="Broke settlement"),
            Movement(id="2", is_rollback=True, justification="  "),
            Movement(id="3", is_rollback=True),
            Movement(id="4", justification="not a rollback"),
        ]
        audit = engine.rollback_audit(movements)

        assert [m.id for m in audit.justified] == ["1"]
        assert [m.id for m in audit.pending] == ["2", "3"]
        assert audit.total == 3


@pytest.mark.unit
class TestProjectProgress:
    """Tests for project_progress."""

    def test_figures(self, engine, make_ticket) -> None:
        project = Project(id="p1", name="Direct Debit")
        tickets = [
            make_ticket(
                project_id="p1",
                status="Done",
                delivery_points=5,
                created_at=NOW - timedelta(days=30),
                updated_at=NOW - timedelta(days=1),
            ),
            make_ticket(
                project_id="p1",
                status="QA",
                delivery_points=3,
                created_at=NOW - timedelta(days=20),
                updated_at=NOW - timedelta(days=10),
            ),
            make_ticket(
                project_id="p1",
                status="In Progress",
                delivery_points=2,
                created_at=NOW - timedelta(days=3),
            ),
            make_ticket(project_id="p1", status="Backlog"),
            make_ticket(project_id="other", status="Backlog", created_at=NOW - timedelta(days=99)),
        ]

        progress = engine.project_progress(project, tickets, now=NOW)

        assert progress.total_tickets == 4
        assert progress.completed_tickets == 1
        assert progress.ticket_percentage == 25
        assert progress.total_points == 10
        assert progress.completed_points == 5
        assert progress.points_percentage == 50
        assert progress.sla_breaches == 1
        assert progress.stale_tickets == 1
        assert progress.earliest_created == NOW - timedelta(days=30)
        assert progress.latest_activity == NOW - timedelta(days=1)

    def test_empty_project(self, engine) -> None:
        progress = engine.project_progress(Project(id="p1"), [], now=NOW)

        assert progress.ticket_percentage == 0
        assert progress.earliest_created is None
        assert progress.latest_activity is None
        assert progress.name == "p1"


@pytest.mark.unit
class TestActiveScope:
    """Tests for date-range narrowing of teams and projects."""

    def test_no_date_filter_keeps_all(self, engine, collections_team, switching_team, projects):
        teams = [collections_team, switching_team]

        assert engine.active_projects(projects, [], date_filtered=False) == projects
        assert engine.active_teams(teams, [], [], date_filtered=False) == teams

    def test_date_filter_narrows(
        self, engine, make_ticket, collections_team, switching_team, projects
    ) -> None:
        extra_team = Team(id="3", name="Data & Identity")
        tickets = [make_ticket(project_id="p1")]
        incidents = [DevelopmentIncident(id="i", team="Data & Identity")]

        active = engine.active_projects(projects, tickets, date_filtered=True)
        teams = engine.active_teams(
            [collections_team, switching_team, extra_team], active, incidents, date_filtered=True
        )

        assert [p.id for p in active] == ["p1"]
        assert [t.name for t in teams] == ["Collections", "Data & Identity"]

    def test_open_project_count(self, engine) -> None:
        projects = [
            Project(id="1", status="Live"),
            Project(id="2", status="active"),
            Project(id="3"),
        ]

        assert engine.open_project_count(projects, date_filtered=False) == 2
        assert engine.open_project_count(projects, date_filtered=True) == 3


@pytest.mark.unit
class TestReport:
    """Tests for the combined analytics report."""

    def test_report_for_all_teams(
        self, engine, make_ticket, collections_team, switching_team, projects
    ) -> None:
        tickets = [
            make_ticket(project_id="p1", status="Done", assigned_to="Ada"),
            make_ticket(project_id="p2", status="Backlog", risk=2, assigned_to="Bo"),
        ]
        report = engine.report([collections_team, switching_team], projects, tickets)

        assert report.overall.total == 2
        assert report.overall.percentage == 50
        assert {w.team for w in report.workload} == {"Collections", "Core Switching"}
        assert report.risk.high == 1
        assert report.active_projects == 2

    def test_report_for_one_team(
        self, engine, make_ticket, collections_team, switching_team, projects
    ) -> None:
        tickets = [
            make_ticket(project_id="p1", status="Done"),
            make_ticket(project_id="p2", status="QA"),
        ]
        report = engine.report(
            [collections_team, switching_team], projects, tickets, team=collections_team
        )

        assert [w.team for w in report.workload] == ["Collections"]
        assert report.overall.total == 1
        assert report.overall.percentage == 100

    def test_report_with_date_range_narrows_teams(
        self, engine, make_ticket, collections_team, switching_team, projects
    ) -> None:
        tickets = [make_ticket(project_id="p2", delivery_points=3)]
        date_range = DateRange(datetime(2024, 1, 1, tzinfo=UTC), None)

        report = engine.report(
            [collections_team, switching_team], projects, tickets, date_range=date_range
        )

        assert [w.team for w in report.workload] == ["Core Switching"]
        assert report.points[0].from_tickets
