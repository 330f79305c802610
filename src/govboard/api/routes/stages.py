"""Stage resolution endpoints."""

from fastapi import APIRouter

from govboard.api.models import (
    APIResponse,
    ResolvedPriority,
    ResolvedStatus,
    ResolveRequest,
    ResolveResponse,
    StageResponse,
)
from govboard.stages import (
    STAGE_LABELS,
    StageResolver,
    priority_label,
    resolve_priority,
    stage_label,
)

router = APIRouter(prefix="/stages", tags=["stages"])


@router.get("", response_model=APIResponse[list[StageResponse]])
def list_stages() -> APIResponse[list[StageResponse]]:
    """List the canonical stages in order."""
    return APIResponse(
        data=[StageResponse(stage=stage, label=label) for stage, label in STAGE_LABELS.items()]
    )


@router.post("/resolve", response_model=APIResponse[ResolveResponse])
def resolve(request: ResolveRequest) -> APIResponse[ResolveResponse]:
    """Resolve raw statuses and priorities, reporting default fallbacks."""
    resolver = StageResolver()
    statuses = []
    for raw in request.statuses:
        before = resolver.fallback_total
        stage = resolver.resolve(raw)
        statuses.append(
            ResolvedStatus(
                raw=raw,
                stage=stage,
                label=stage_label(stage),
                fallback=resolver.fallback_total > before,
            )
        )

    priorities = []
    for raw in request.priorities:
        level = resolve_priority(raw)
        priorities.append(ResolvedPriority(raw=raw, level=level, label=priority_label(level)))

    return APIResponse(
        data=ResolveResponse(
            statuses=statuses,
            priorities=priorities,
            fallback_hits=dict(resolver.fallback_hits),
        )
    )
