"""FilterPipeline - composable ticket predicates applied as a logical AND."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from govboard.boards import DEFAULT_REGISTRY, normalize_team_name
from govboard.filters.exceptions import FilterError
from govboard.filters.models import DateRange

if TYPE_CHECKING:
    from datetime import date, datetime

    from govboard.boards import BoardRegistry
    from govboard.records import Project, Team, Ticket

logger = logging.getLogger(__name__)

TicketPredicate = Callable[["Ticket"], bool]

# Timestamp used by the date-range filter.
_DATE_FIELDS: dict[str, Callable[[Ticket], datetime | None]] = {
    "created": lambda t: t.created_at,
    "updated": lambda t: t.last_activity,
}

_SEARCH_FIELDS: tuple[Callable[[Ticket], str | None], ...] = (
    lambda t: t.title,
    lambda t: t.jira_key,
    lambda t: t.assigned_to,
    lambda t: t.team,
)


def _fold_code(value: Any) -> str:
    return str(value).strip().casefold()


def team_projects(team: Team, projects: Iterable[Project]) -> list[Project]:
    """Projects owned by a team: by team id, plus any nested under the team."""
    owned = {p.id: p for p in projects if p.team_id is not None and p.team_id == team.id}
    for project in team.projects or ():
        owned.setdefault(project.id, project)
    return list(owned.values())


def team_predicate(
    team: Team,
    projects: Iterable[Project],
    registry: BoardRegistry = DEFAULT_REGISTRY,
) -> TicketPredicate:
    """Ticket belongs to team by project, epic key, key prefix or team text."""
    owned = team_projects(team, projects)
    project_ids = frozenset(p.id for p in owned)
    project_keys = frozenset(p.jira_key for p in owned if p.jira_key and p.jira_key.strip())
    canonical = registry.canonical_name(team.name) or normalize_team_name(team.name)
    team_text = team.name.strip().casefold()

    def belongs(ticket: Ticket) -> bool:
        if ticket.project_id is not None and ticket.project_id in project_ids:
            return True
        if ticket.epic_key and ticket.epic_key in project_keys:
            return True
        if registry.team_for_key(ticket.jira_key) == canonical:
            return True
        if ticket.team:
            return (
                ticket.team.strip().casefold() == team_text
                or normalize_team_name(ticket.team) == canonical
            )
        return False

    return belongs


def date_predicate(date_range: DateRange, field: str = "created") -> TicketPredicate:
    """Inclusive bound test on the created or updated timestamp."""
    try:
        timestamp = _DATE_FIELDS[field]
    except KeyError:
        raise FilterError(
            f"Unknown date field {field!r}, expected one of {sorted(_DATE_FIELDS)}"
        ) from None
    return lambda t: date_range.contains(timestamp(t))


class FilterPipeline:
    """Immutable chain of ticket predicates.

    Each ``by_*`` method returns a new pipeline with one more predicate;
    ``apply`` keeps the tickets accepted by every predicate. Predicates are
    pure, so the order in which they are added does not change the result.

    Example:
        pipeline = FilterPipeline().by_team(team, projects).by_search("login")
        visible = pipeline.apply(tickets)
    """

    def __init__(
        self,
        predicates: tuple[TicketPredicate, ...] = (),
        date_range: DateRange | None = None,
    ) -> None:
        self._predicates = predicates
        self._date_range = date_range

    @property
    def date_range(self) -> DateRange | None:
        """Active date range, if one was added."""
        return self._date_range

    @property
    def is_date_filtered(self) -> bool:
        return self._date_range is not None and self._date_range.is_active

    def where(self, predicate: TicketPredicate) -> FilterPipeline:
        """Add an arbitrary predicate."""
        return FilterPipeline(self._predicates + (predicate,), self._date_range)

    def by_team(
        self,
        team: Team | None,
        projects: Iterable[Project] = (),
        registry: BoardRegistry = DEFAULT_REGISTRY,
    ) -> FilterPipeline:
        """Keep tickets of one team; None means all teams."""
        if team is None:
            return self
        return self.where(team_predicate(team, projects, registry))

    def by_date_range(
        self,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        field: str = "created",
    ) -> FilterPipeline:
        """Keep tickets whose timestamp lies within [start, end].

        Absent bounds are a no-op. While a bound is set, tickets without the
        timestamp are excluded.

        Raises:
            FilterError: If start is after end or the field is unknown.
        """
        date_range = DateRange(start, end)
        predicate = date_predicate(date_range, field)
        if not date_range.is_active:
            return self
        return FilterPipeline(self._predicates + (predicate,), date_range)

    def by_projects(self, project_ids: Iterable[str] | None) -> FilterPipeline:
        """Keep tickets whose project id is in project_ids; None or empty is a no-op."""
        ids = frozenset(str(p) for p in project_ids or ())
        if not ids:
            return self
        return self.where(lambda t: t.project_id in ids)

    def by_search(self, query: str | None) -> FilterPipeline:
        """Case-insensitive substring search over title, key, assignee and team."""
        needle = (query or "").strip().casefold()
        if not needle:
            return self

        def matches(ticket: Ticket) -> bool:
            for get in _SEARCH_FIELDS:
                value = get(ticket)
                if value and needle in value.casefold():
                    return True
            return False

        return self.where(matches)

    def by_status(self, *statuses: Any) -> FilterPipeline:
        """Keep tickets whose raw status is one of statuses."""
        if not statuses:
            return self
        wanted = frozenset(_fold_code(s) for s in statuses)
        return self.where(lambda t: t.status is not None and _fold_code(t.status) in wanted)

    def exclude_status(self, *statuses: Any) -> FilterPipeline:
        """Drop tickets whose raw status is one of statuses."""
        if not statuses:
            return self
        unwanted = frozenset(_fold_code(s) for s in statuses)
        return self.where(lambda t: t.status is None or _fold_code(t.status) not in unwanted)

    def by_type(self, *issue_types: str) -> FilterPipeline:
        """Keep tickets whose issue type is one of issue_types (case-insensitive)."""
        if not issue_types:
            return self
        wanted = frozenset(_fold_code(t) for t in issue_types)
        return self.where(lambda t: t.issue_type is not None and _fold_code(t.issue_type) in wanted)

    def __call__(self, ticket: Ticket) -> bool:
        return all(predicate(ticket) for predicate in self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def apply(self, tickets: Iterable[Ticket]) -> list[Ticket]:
        """Return the tickets accepted by every predicate, in input order."""
        source = list(tickets)
        kept = [t for t in source if self(t)]
        logger.debug(
            "Filter pipeline kept %d of %d tickets (%d predicates)",
            len(kept),
            len(source),
            len(self._predicates),
        )
        return kept
