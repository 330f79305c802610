"""Records - read-only domain records parsed from upstream JSON."""

from govboard.records.exceptions import RecordError
from govboard.records.fields import parse_datetime, pick, unwrap_items
from govboard.records.models import (
    DevelopmentIncident,
    Movement,
    Project,
    Team,
    Ticket,
    key_prefix,
)
from govboard.records.parsing import (
    annotate,
    annotate_tickets,
    parse_incidents,
    parse_movements,
    parse_projects,
    parse_teams,
    parse_tickets,
    stage_of,
)

__all__ = [
    "DevelopmentIncident",
    "Movement",
    "Project",
    "RecordError",
    "Team",
    "Ticket",
    "annotate",
    "annotate_tickets",
    "key_prefix",
    "parse_datetime",
    "parse_incidents",
    "parse_movements",
    "parse_projects",
    "parse_teams",
    "parse_tickets",
    "pick",
    "stage_of",
    "unwrap_items",
]
