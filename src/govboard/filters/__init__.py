"""FilterPipeline - narrows ticket collections before aggregation."""

from govboard.filters.exceptions import FilterError
from govboard.filters.models import DateRange
from govboard.filters.pipeline import (
    FilterPipeline,
    TicketPredicate,
    date_predicate,
    team_predicate,
    team_projects,
)

__all__ = [
    "DateRange",
    "FilterError",
    "FilterPipeline",
    "TicketPredicate",
    "date_predicate",
    "team_predicate",
    "team_projects",
]
