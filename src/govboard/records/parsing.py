"""Bulk parsing and stage annotation of upstream collections."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any, TypeVar

from govboard.logging import format_fallbacks
from govboard.records.fields import unwrap_items
from govboard.records.models import DevelopmentIncident, Movement, Project, Team, Ticket
from govboard.stages import StageResolver, resolve_priority, resolve_stage

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _parse_all(payload: Any, build: Callable[[Any], R], kind: str) -> list[R]:
    records = []
    for item in unwrap_items(payload):
        if not isinstance(item, Mapping):
            logger.warning("Skipping %s entry that is not an object: %r", kind, item)
            continue
        records.append(build(item))
    return records


def parse_tickets(payload: Any) -> list[Ticket]:
    """Parse a ticket list or ``{"items": [...]}`` envelope."""
    return _parse_all(payload, Ticket.from_record, "ticket")


def parse_teams(payload: Any) -> list[Team]:
    """Parse a team list or envelope."""
    return _parse_all(payload, Team.from_record, "team")


def parse_projects(payload: Any) -> list[Project]:
    """Parse a project list or envelope."""
    return _parse_all(payload, Project.from_record, "project")


def parse_movements(payload: Any) -> list[Movement]:
    """Parse a movement (or rollback) list or envelope."""
    return _parse_all(payload, Movement.from_record, "movement")


def parse_incidents(payload: Any) -> list[DevelopmentIncident]:
    """Parse a development-incident list or envelope."""
    return _parse_all(payload, DevelopmentIncident.from_record, "incident")


def annotate(ticket: Ticket, resolver: StageResolver | None = None) -> Ticket:
    """Return a copy of ticket with canonical stage and priority ordinal set."""
    stage = resolver.resolve(ticket.status) if resolver else resolve_stage(ticket.status)
    return replace(ticket, stage=stage, priority_level=resolve_priority(ticket.priority))


def annotate_tickets(
    tickets: Iterable[Ticket], resolver: StageResolver | None = None
) -> list[Ticket]:
    """Annotate every ticket; the input collection is left untouched."""
    annotated = [annotate(t, resolver) for t in tickets]
    if resolver is not None and resolver.fallback_total:
        logger.info(
            "%d ticket status(es) fell back to To Do: %s",
            resolver.fallback_total,
            format_fallbacks(resolver.fallback_hits),
        )
    return annotated


def stage_of(ticket: Ticket) -> int:
    """Canonical stage of a ticket, resolving on the fly if not annotated."""
    if ticket.stage is not None:
        return ticket.stage
    return resolve_stage(ticket.status)
