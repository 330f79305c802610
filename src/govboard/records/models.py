"""Read-only domain records built from upstream JSON."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - dataclass field types
from typing import Any

from govboard.records.exceptions import RecordError
from govboard.records.fields import (
    as_bool,
    as_ident,
    as_int,
    as_number,
    as_text,
    parse_datetime,
    pick,
)


def _require_mapping(record: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise RecordError(f"{kind} record must be a mapping, got {type(record).__name__}")
    return record


def _optional_number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return as_number(value)


def key_prefix(key: str | None) -> str | None:
    """Tracker-key prefix, e.g. "SKP" for "SKP-123"."""
    if not key:
        return None
    prefix = key.split("-", 1)[0].strip().upper()
    return prefix or None


@dataclass(frozen=True)
class Project:
    """A project owned by a team.

    Attributes:
        planned_points: Project-level aggregate, possibly stale.
        completed_points: Project-level aggregate, possibly stale.
    """

    id: str
    name: str = ""
    jira_key: str | None = None
    team_id: str | None = None
    planned_points: float | None = None
    completed_points: float | None = None
    status: str | None = None

    @classmethod
    def from_record(cls, record: Any) -> Project:
        data = _require_mapping(record, "Project")
        return cls(
            id=as_ident(pick(data, "id")) or "",
            name=as_text(pick(data, "name")) or "",
            jira_key=as_text(pick(data, "jiraKey")) or None,
            team_id=as_ident(pick(data, "teamId")),
            planned_points=_optional_number(pick(data, "plannedPoints")),
            completed_points=_optional_number(pick(data, "completedPoints")),
            status=as_text(pick(data, "status")),
        )


@dataclass(frozen=True)
class Team:
    """A delivery team and its (optionally nested) projects."""

    id: str
    name: str
    members: int = 0
    lead: str | None = None
    prefix: str | None = None
    projects: tuple[Project, ...] | None = None

    @classmethod
    def from_record(cls, record: Any) -> Team:
        data = _require_mapping(record, "Team")
        nested = pick(data, "projects")
        projects = None
        if isinstance(nested, list):
            projects = tuple(Project.from_record(p) for p in nested if isinstance(p, Mapping))
        return cls(
            id=as_ident(pick(data, "id")) or "",
            name=as_text(pick(data, "name")) or "",
            members=as_int(pick(data, "members")),
            lead=as_text(pick(data, "lead")),
            prefix=(as_text(pick(data, "prefix", "jiraKey")) or "").upper() or None,
            projects=projects,
        )


@dataclass(frozen=True)
class Ticket:
    """A development ticket.

    ``status`` and ``priority`` hold the raw upstream values; ``stage`` and
    ``priority_level`` are filled in by annotation.
    """

    id: str
    status: Any = None
    priority: Any = None
    title: str = ""
    jira_key: str | None = None
    project_id: str | None = None
    epic_key: str | None = None
    team: str | None = None
    assigned_to: str | None = None
    issue_type: str | None = None
    delivery_points: float = 0.0
    complexity: int = 0
    risk: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_rollback: bool = False
    stage: int | None = None
    priority_level: int | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, record: Any) -> Ticket:
        data = _require_mapping(record, "Ticket")
        return cls(
            id=as_ident(pick(data, "id")) or "",
            status=pick(data, "status"),
            priority=pick(data, "priority"),
            title=as_text(pick(data, "title", "summary")) or "",
            jira_key=as_text(pick(data, "jiraKey", "key")),
            project_id=as_ident(pick(data, "projectId")),
            epic_key=as_text(pick(data, "epicKey")),
            team=as_text(pick(data, "team")),
            assigned_to=as_text(pick(data, "assignedTo", "assignee")),
            issue_type=as_text(pick(data, "issueType", "type")),
            delivery_points=as_number(pick(data, "deliveryPoints")),
            complexity=as_int(pick(data, "complexity")),
            risk=as_int(pick(data, "risk")),
            created_at=parse_datetime(pick(data, "createdAt")),
            updated_at=parse_datetime(pick(data, "updatedAt", "jiraUpdatedAt")),
            is_rollback=as_bool(pick(data, "isRollback", default=False)),
            raw=dict(data),
        )

    @property
    def tracker_prefix(self) -> str | None:
        """Prefix of the tracker key ("SKP" for "SKP-123")."""
        return key_prefix(self.jira_key)

    @property
    def last_activity(self) -> datetime | None:
        """Most recent known timestamp: updated, else created."""
        return self.updated_at or self.created_at


@dataclass(frozen=True)
class Movement:
    """A recorded status or support-tier transition of a ticket."""

    id: str
    ticket_id: str | None = None
    jira_key: str | None = None
    from_status: Any = None
    to_status: Any = None
    from_level: str | None = None
    to_level: str | None = None
    is_rollback: bool = False
    justification: str | None = None
    justified_by: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Any) -> Movement:
        data = _require_mapping(record, "Movement")
        return cls(
            id=as_ident(pick(data, "id")) or "",
            ticket_id=as_ident(pick(data, "ticketId")),
            jira_key=as_text(pick(data, "jiraKey", "externalId", "freshdeskId")),
            from_status=pick(data, "fromStatus"),
            to_status=pick(data, "toStatus"),
            from_level=as_text(pick(data, "fromLevel")),
            to_level=as_text(pick(data, "toLevel", "supportLevel")),
            is_rollback=as_bool(pick(data, "isRollback", default=False)),
            justification=as_text(pick(data, "justification")),
            justified_by=as_text(pick(data, "justifiedBy")),
            created_at=parse_datetime(pick(data, "createdAt", "movedAt")),
        )

    @property
    def is_justified(self) -> bool:
        """True when a non-blank justification has been recorded."""
        return bool(self.justification and self.justification.strip())


@dataclass(frozen=True)
class DevelopmentIncident:
    """An escalated (L4) incident handled by a development team."""

    id: str
    title: str = ""
    team: str | None = None
    jira_key: str | None = None
    assigned_to: str | None = None
    priority: str | None = None
    status: Any = None
    sla_breach: bool = False
    resolved: bool = False
    created_at: datetime | None = None
    resolved_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Any) -> DevelopmentIncident:
        data = _require_mapping(record, "DevelopmentIncident")
        return cls(
            id=as_ident(pick(data, "id")) or "",
            title=as_text(pick(data, "title", "subject")) or "",
            team=as_text(pick(data, "team")),
            jira_key=as_text(pick(data, "jiraKey")),
            assigned_to=as_text(pick(data, "assignedTo")),
            priority=as_text(pick(data, "priority")),
            status=pick(data, "status"),
            sla_breach=as_bool(pick(data, "slaBreach", default=False)),
            resolved=bool(pick(data, "resolvedAt")),
            created_at=parse_datetime(pick(data, "createdAt")),
            resolved_at=parse_datetime(pick(data, "resolvedAt")),
        )

    @property
    def is_resolved(self) -> bool:
        """Resolved externally (the tracker recorded a resolution time)."""
        return self.resolved or self.resolved_at is not None
