"""Escalation list endpoint."""

from fastapi import APIRouter

from govboard.analytics import escalation_view
from govboard.api.dependencies import DateRangeDep, TrackerClientDep
from govboard.api.models import APIResponse, EscalationViewResponse

router = APIRouter(tags=["escalations"])


@router.get("/escalations", response_model=APIResponse[EscalationViewResponse])
async def list_escalations(
    client: TrackerClientDep,
    date_range: DateRangeDep,
    from_level: str | None = None,
    to_level: str | None = None,
) -> APIResponse[EscalationViewResponse]:
    """Tier movements for a from/to level filter; de-escalations are not shown."""
    movements = await client.get_ticket_movements(date_range)
    tiered = [m for m in movements if m.from_level or m.to_level]
    view = escalation_view(tiered, from_level, to_level)
    return APIResponse(data=EscalationViewResponse.model_validate(view))
