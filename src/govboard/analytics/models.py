"""Data models for the AggregationEngine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - dataclass field types
from enum import Enum
from typing import TYPE_CHECKING

from govboard.analytics.ratios import percentage

if TYPE_CHECKING:
    from govboard.records import Movement


@dataclass
class TeamWorkload:
    """Ticket and incident counts for one team.

    Attributes:
        active: total - completed.
        completed: Live tickets plus externally resolved incidents.
        total: Tickets plus incidents.
    """

    team: str
    active: int = 0
    completed: int = 0
    total: int = 0

    @property
    def progress(self) -> int:
        """Completion percentage, 0 for an empty team."""
        return percentage(self.completed, self.total)


@dataclass
class PointsDelivery:
    """Planned vs completed delivery points for one team."""

    team: str
    planned: float = 0.0
    completed: float = 0.0
    percentage: int = 0
    from_tickets: bool = False


@dataclass
class OverallProgress:
    total: int = 0
    completed: int = 0
    percentage: int = 0


@dataclass
class StatusCount:
    label: str
    count: int


@dataclass
class TeamCorrelation:
    """Incidents vs development effort for one team.

    Attributes:
        incidents: Incident-type tickets plus development incidents.
        development: Non-incident tickets.
        incident_density: incidents per 10 development tickets, 0 when
            there is no development work.
    """

    team: str
    incidents: int = 0
    development: int = 0
    incident_density: float = 0.0


@dataclass
class RiskBuckets:
    """Backlog tickets grouped by risk score."""

    low: int = 0
    medium: int = 0
    high: int = 0

    def as_list(self) -> list[tuple[str, int]]:
        return [("Low Risk", self.low), ("Medium Risk", self.medium), ("High Risk", self.high)]


@dataclass
class MovementRollbackCount:
    team: str
    movements: int = 0
    rollbacks: int = 0


@dataclass
class DistributionEntry:
    name: str
    value: int


@dataclass
class ProjectProgress:
    """Completion and health of one project's tickets."""

    project_id: str
    name: str
    total_tickets: int = 0
    completed_tickets: int = 0
    ticket_percentage: int = 0
    total_points: float = 0.0
    completed_points: float = 0.0
    points_percentage: int = 0
    sla_breaches: int = 0
    stale_tickets: int = 0
    earliest_created: datetime | None = None
    latest_activity: datetime | None = None


@dataclass
class RollbackAudit:
    """Rollback movements split by whether a justification was recorded."""

    justified: list[Movement] = field(default_factory=list)
    pending: list[Movement] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.justified) + len(self.pending)


class TransitionKind(str, Enum):
    """Direction of a support-tier transition."""

    ESCALATION = "escalation"
    DE_ESCALATION = "de_escalation"
    LATERAL = "lateral"
    UNKNOWN = "unknown"


@dataclass
class EscalationView:
    """Escalation movements matching a from/to tier filter.

    Attributes:
        items: Movements shown by the view.
        excluded: De-escalation movements dropped from the view.
        deescalation: True when the filter itself asks for a de-escalation
            and the view was refused.
        message: User-facing explanation when the view is refused.
    """

    items: list[Movement] = field(default_factory=list)
    excluded: int = 0
    deescalation: bool = False
    message: str | None = None


@dataclass
class AnalyticsReport:
    """Every dashboard aggregation computed from one snapshot."""

    workload: list[TeamWorkload] = field(default_factory=list)
    points: list[PointsDelivery] = field(default_factory=list)
    overall: OverallProgress = field(default_factory=OverallProgress)
    status_histogram: list[StatusCount] = field(default_factory=list)
    correlation: list[TeamCorrelation] = field(default_factory=list)
    risk: RiskBuckets = field(default_factory=RiskBuckets)
    movements: list[MovementRollbackCount] = field(default_factory=list)
    agents: list[DistributionEntry] = field(default_factory=list)
    projects: list[DistributionEntry] = field(default_factory=list)
    active_projects: int = 0
