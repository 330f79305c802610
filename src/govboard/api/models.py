"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from govboard.records import Ticket, stage_of
from govboard.stages import priority_label, resolve_priority, stage_label

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Ticket and board models


class TicketResponse(BaseModel):
    """Response model for an annotated ticket."""

    id: str
    jira_key: str | None
    title: str
    status: Any
    stage: int
    stage_label: str
    priority_level: int
    priority_label: str
    team: str | None
    assigned_to: str | None
    project_id: str | None
    delivery_points: float
    risk: int
    is_rollback: bool
    created_at: datetime | None
    updated_at: datetime | None


def ticket_to_response(ticket: Ticket) -> TicketResponse:
    """Convert a Ticket record to TicketResponse."""
    stage = stage_of(ticket)
    level = (
        ticket.priority_level
        if ticket.priority_level is not None
        else resolve_priority(ticket.priority)
    )
    return TicketResponse(
        id=ticket.id,
        jira_key=ticket.jira_key,
        title=ticket.title,
        status=ticket.status,
        stage=stage,
        stage_label=stage_label(stage),
        priority_level=level,
        priority_label=priority_label(level),
        team=ticket.team,
        assigned_to=ticket.assigned_to,
        project_id=ticket.project_id,
        delivery_points=ticket.delivery_points,
        risk=ticket.risk,
        is_rollback=ticket.is_rollback,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
    )


class ColumnResponse(BaseModel):
    """A board column definition."""

    label: str
    color: str


class LaneResponse(BaseModel):
    """A board column and the tickets bucketed into it."""

    label: str
    color: str
    count: int
    tickets: list[TicketResponse]


class BoardResponse(BaseModel):
    """Response model for a sprint or execution board.

    ``backlog``, ``completed`` and ``rollbacks`` are only filled for the
    execution view; ``unmatched`` only for the sprint view.
    """

    team: str
    view: str
    lanes: list[LaneResponse]
    backlog: list[TicketResponse] = Field(default_factory=list)
    completed: list[TicketResponse] = Field(default_factory=list)
    rollbacks: list[TicketResponse] = Field(default_factory=list)
    unmatched: list[TicketResponse] = Field(default_factory=list)


# Analytics models


class TeamWorkloadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team: str
    active: int
    completed: int
    total: int
    progress: int


class PointsDeliveryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team: str
    planned: float
    completed: float
    percentage: int
    from_tickets: bool


class OverallProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int
    percentage: int


class StatusCountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    count: int


class TeamCorrelationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team: str
    incidents: int
    development: int
    incident_density: float


class RiskBucketsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    low: int
    medium: int
    high: int


class MovementRollbackResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team: str
    movements: int
    rollbacks: int


class DistributionEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: int


class AnalyticsResponse(BaseModel):
    """Response model for the analytics dashboard."""

    model_config = ConfigDict(from_attributes=True)

    workload: list[TeamWorkloadResponse]
    points: list[PointsDeliveryResponse]
    overall: OverallProgressResponse
    status_histogram: list[StatusCountResponse]
    correlation: list[TeamCorrelationResponse]
    risk: RiskBucketsResponse
    movements: list[MovementRollbackResponse]
    agents: list[DistributionEntryResponse]
    projects: list[DistributionEntryResponse]
    active_projects: int
    status_fallbacks: int = 0


def analytics_to_response(report: Any, status_fallbacks: int = 0) -> AnalyticsResponse:
    """Convert an AnalyticsReport to AnalyticsResponse."""
    response = AnalyticsResponse.model_validate(report)
    response.status_fallbacks = status_fallbacks
    return response


class ProjectProgressResponse(BaseModel):
    """Response model for a project's progress and health."""

    model_config = ConfigDict(from_attributes=True)

    project_id: str
    name: str
    total_tickets: int
    completed_tickets: int
    ticket_percentage: int
    total_points: float
    completed_points: float
    points_percentage: int
    sla_breaches: int
    stale_tickets: int
    earliest_created: datetime | None
    latest_activity: datetime | None


# Movement models


class MovementResponse(BaseModel):
    """Response model for a tier or status movement."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    ticket_id: str | None
    jira_key: str | None
    from_level: str | None
    to_level: str | None
    is_rollback: bool
    justification: str | None
    justified_by: str | None
    created_at: datetime | None


class EscalationViewResponse(BaseModel):
    """Response model for the escalation list."""

    model_config = ConfigDict(from_attributes=True)

    items: list[MovementResponse]
    excluded: int
    deescalation: bool
    message: str | None


class RollbackAuditResponse(BaseModel):
    """Response model for the rollback justification audit."""

    model_config = ConfigDict(from_attributes=True)

    justified: list[MovementResponse]
    pending: list[MovementResponse]
    total: int


# Stage resolution models


class ResolveRequest(BaseModel):
    """Request model for resolving raw statuses and priorities."""

    statuses: list[int | str | None] = Field(default_factory=list, max_length=1000)
    priorities: list[int | str | None] = Field(default_factory=list, max_length=1000)


class ResolvedStatus(BaseModel):
    raw: int | str | None
    stage: int
    label: str
    fallback: bool


class ResolvedPriority(BaseModel):
    raw: int | str | None
    level: int
    label: str


class ResolveResponse(BaseModel):
    """Response model for stage resolution."""

    statuses: list[ResolvedStatus]
    priorities: list[ResolvedPriority]
    fallback_hits: dict[str, int]


class StageResponse(BaseModel):
    stage: int
    label: str


class HealthResponse(BaseModel):
    status: str
    version: str
