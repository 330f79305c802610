"""Canonical Stage Resolver - maps raw tracker statuses onto the canonical workflow."""

from govboard.stages.models import (
    PENDING_LABEL,
    STAGE_LABELS,
    CanonicalStage,
    Priority,
    priority_label,
    stage_label,
)
from govboard.stages.resolver import (
    StageResolver,
    normalize_status,
    resolve_priority,
    resolve_stage,
)

__all__ = [
    "PENDING_LABEL",
    "STAGE_LABELS",
    "CanonicalStage",
    "Priority",
    "StageResolver",
    "normalize_status",
    "priority_label",
    "resolve_priority",
    "resolve_stage",
    "stage_label",
]
