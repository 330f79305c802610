"""Board Schema Registry - per-team column layouts and board projection."""

from govboard.boards.exceptions import BoardError, BoardSchemaError
from govboard.boards.models import (
    BoardColumn,
    BoardLane,
    ExactStatus,
    ExecutionBoard,
    SprintBoard,
    StageSet,
    StatusContains,
)
from govboard.boards.registry import (
    DEFAULT_REGISTRY,
    UNASSIGNED_TEAM,
    BoardRegistry,
    normalize_team_name,
    validate_schema,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "UNASSIGNED_TEAM",
    "BoardColumn",
    "BoardError",
    "BoardLane",
    "BoardRegistry",
    "BoardSchemaError",
    "ExactStatus",
    "ExecutionBoard",
    "SprintBoard",
    "StageSet",
    "StatusContains",
    "normalize_team_name",
    "validate_schema",
]
