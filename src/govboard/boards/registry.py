"""BoardRegistry - team board schemas and ticket-to-column projection."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from govboard.boards.exceptions import BoardSchemaError
from govboard.boards.models import (
    BoardColumn,
    BoardLane,
    ExecutionBoard,
    SprintBoard,
)
from govboard.boards.schemas import FALLBACK, TEAM_ALIASES, TEAM_SCHEMAS, TRACKER_PREFIXES
from govboard.records import key_prefix, stage_of
from govboard.stages import CanonicalStage

if TYPE_CHECKING:
    from govboard.records import Team, Ticket

logger = logging.getLogger(__name__)

UNASSIGNED_TEAM = "Unassigned"

# Stages every schema must place in some column. Rollback is tracked through
# the ticket's rollback flag instead of a column.
_COVERED_STAGES = frozenset(range(CanonicalStage.TO_DO, CanonicalStage.LIVE + 1))


def _accepted_stages(column: BoardColumn) -> set[int]:
    return {s for s in range(CanonicalStage.ROLLBACK + 1) if column.stage_matcher(s)}


def validate_schema(name: str, columns: Sequence[BoardColumn]) -> None:
    """Check the column layout invariants of one schema.

    Raises:
        BoardSchemaError: If the stage matchers leave a stage of 0..11
            uncovered, or To Do / Done are not the first / last columns only.
    """
    if len(columns) < 3:
        raise BoardSchemaError(f"Schema {name!r} needs at least To Do, one active and Done column")

    covered: set[int] = set()
    for column in columns:
        covered |= _accepted_stages(column)
    missing = _COVERED_STAGES - covered
    if missing:
        raise BoardSchemaError(f"Schema {name!r} does not cover stages {sorted(missing)}")

    if not columns[0].stage_matcher(CanonicalStage.TO_DO):
        raise BoardSchemaError(f"Schema {name!r} must start with the To Do column")
    if not columns[-1].stage_matcher(CanonicalStage.LIVE):
        raise BoardSchemaError(f"Schema {name!r} must end with the Done column")
    for column in columns[1:-1]:
        accepted = _accepted_stages(column)
        if CanonicalStage.TO_DO in accepted or CanonicalStage.LIVE in accepted:
            raise BoardSchemaError(
                f"Schema {name!r}: active column {column.label!r} accepts To Do or Done"
            )


def normalize_team_name(team: str | None) -> str:
    """Fold a free-text team string into a canonical team name."""
    if not team or not team.strip():
        return UNASSIGNED_TEAM
    name = team.strip()
    upper = name.upper()

    if upper in ("DATA AND IDENTITY", "IDENTITY") or "DATA & IDENTITY" in upper:
        return "Data & Identity"
    if upper in ("PAYMENT", "NDD") or "COLLECTIONS" in upper:
        return "Collections"
    if upper in ("CORE", "SWITCHING") or "CORE SWITCH" in upper:
        return "Core Switching"
    if upper in ("ENTERPRISE", "ES", "ENT SOL") or "ENTERPRISE SOLUTION" in upper:
        return "Enterprise Solution"
    return name


class BoardRegistry:
    """Immutable registry of team board schemas.

    Resolves a team name (including known aliases) to its ordered column
    list, falling back to a generic layout for unknown teams, and projects
    tickets onto the sprint and execution boards.
    """

    def __init__(
        self,
        schemas: Mapping[str, Sequence[BoardColumn]],
        fallback: Sequence[BoardColumn],
        aliases: Mapping[str, str] | None = None,
        prefixes: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the registry and validate every schema.

        Args:
            schemas: Team name to ordered columns.
            fallback: Columns for teams without a schema.
            aliases: Alternative team names mapped to schema names.
            prefixes: Tracker-key prefix to canonical team name.

        Raises:
            BoardSchemaError: If any schema breaks the layout invariants.
        """
        for name, columns in schemas.items():
            validate_schema(name, columns)
        validate_schema("fallback", fallback)

        self._schemas = {name: tuple(cols) for name, cols in schemas.items()}
        self._fallback = tuple(fallback)
        self._aliases = dict(aliases or {})
        self._prefixes = {p.upper(): team for p, team in (prefixes or {}).items()}
        self._folded = {name.casefold(): name for name in self._schemas}
        for alias, target in self._aliases.items():
            if target not in self._schemas:
                raise BoardSchemaError(f"Alias {alias!r} points at unknown schema {target!r}")
            self._folded[alias.casefold()] = target

    @property
    def team_names(self) -> list[str]:
        """Names of teams with a dedicated schema."""
        return list(self._schemas)

    def canonical_name(self, team_name: str | None) -> str | None:
        """Schema name for a team name or alias, None for unknown teams."""
        if not team_name:
            return None
        name = team_name.strip()
        if name in self._schemas:
            return name
        if name in self._aliases:
            return self._aliases[name]
        return self._folded.get(name.casefold())

    def get_schema(self, team_name: str | None) -> tuple[BoardColumn, ...]:
        """Ordered board columns for a team, or the fallback layout."""
        canonical = self.canonical_name(team_name)
        if canonical is None:
            logger.debug("No board schema for team %r, using fallback", team_name)
            return self._fallback
        return self._schemas[canonical]

    def execution_columns(self, team_name: str | None) -> tuple[BoardColumn, ...]:
        """Work-in-progress columns: the schema without its first and last column."""
        return self.get_schema(team_name)[1:-1]

    def sprint_board(self, team_name: str | None, tickets: Iterable[Ticket]) -> SprintBoard:
        """Bucket tickets by their live tracker status text."""
        columns = self.get_schema(team_name)
        board = SprintBoard(
            team=team_name or UNASSIGNED_TEAM,
            lanes=[BoardLane(column=c) for c in columns],
        )
        for ticket in tickets:
            raw = "" if ticket.status is None else str(ticket.status)
            placed = False
            for lane in board.lanes:
                if lane.column.sprint_matcher(raw):
                    lane.tickets.append(ticket)
                    placed = True
            if not placed:
                board.unmatched.append(ticket)
        return board

    def execution_board(self, team_name: str | None, tickets: Iterable[Ticket]) -> ExecutionBoard:
        """Bucket tickets by canonical stage over the work-in-progress columns."""
        board = ExecutionBoard(
            team=team_name or UNASSIGNED_TEAM,
            lanes=[BoardLane(column=c) for c in self.execution_columns(team_name)],
        )
        for ticket in tickets:
            stage = stage_of(ticket)
            if ticket.is_rollback or stage == CanonicalStage.ROLLBACK:
                board.rollbacks.append(ticket)
            if stage == CanonicalStage.TO_DO:
                board.backlog.append(ticket)
            elif stage == CanonicalStage.LIVE:
                board.completed.append(ticket)
            for lane in board.lanes:
                if lane.column.stage_matcher(stage):
                    lane.tickets.append(ticket)
        return board

    def team_for_key(self, key: str | None) -> str | None:
        """Canonical team owning a tracker key's prefix ("SKP-123" -> "Collections")."""
        prefix = key_prefix(key)
        if prefix is None:
            return None
        return self._prefixes.get(prefix)

    def prefix_for(self, team_name: str | None) -> str | None:
        """Tracker-key prefix of a team, None when unknown."""
        canonical = self.canonical_name(team_name) or team_name
        for prefix, team in self._prefixes.items():
            if team == canonical:
                return prefix
        return None

    def primary_key_for(self, team: Team) -> str:
        """Tracker project key used to sync a team's live sprint board."""
        prefix = self.prefix_for(team.name)
        if prefix:
            return prefix
        if team.projects:
            for project in team.projects:
                if project.jira_key:
                    return project.jira_key
        if "Collection" in team.name:
            return "SKP"
        if "Switching" in team.name:
            return "CASP"
        if "Identity" in team.name:
            return "IR"
        return "BARP3"


DEFAULT_REGISTRY = BoardRegistry(
    schemas=TEAM_SCHEMAS,
    fallback=FALLBACK,
    aliases=TEAM_ALIASES,
    prefixes=TRACKER_PREFIXES,
)
