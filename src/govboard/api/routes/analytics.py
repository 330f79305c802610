"""Analytics dashboard endpoints."""

from fastapi import APIRouter

from govboard.api.dependencies import DateRangeDep, EngineDep, TrackerClientDep
from govboard.api.exceptions import NotFoundError
from govboard.api.models import (
    AnalyticsResponse,
    APIResponse,
    ProjectProgressResponse,
    RollbackAuditResponse,
    analytics_to_response,
)
from govboard.fetch import load_snapshot

router = APIRouter(tags=["analytics"])


@router.get("/analytics", response_model=APIResponse[AnalyticsResponse])
async def get_analytics(
    client: TrackerClientDep,
    engine: EngineDep,
    date_range: DateRangeDep,
    team_id: str | None = None,
) -> APIResponse[AnalyticsResponse]:
    """Workload, points, status, correlation and risk metrics for all teams or one."""
    snapshot = await load_snapshot(client, date_range)
    team = None
    if team_id is not None:
        team = snapshot.team(team_id)
        if team is None:
            raise NotFoundError("Team", team_id)

    report = engine.report(
        teams=snapshot.teams,
        projects=snapshot.projects,
        tickets=snapshot.tickets,
        incidents=snapshot.incidents,
        movements=snapshot.movements,
        rollbacks=snapshot.rollbacks,
        team=team,
        date_range=date_range,
    )
    return APIResponse(data=analytics_to_response(report, snapshot.resolver.fallback_total))


@router.get(
    "/projects/{project_id}/progress",
    response_model=APIResponse[ProjectProgressResponse],
)
async def get_project_progress(
    project_id: str,
    client: TrackerClientDep,
    engine: EngineDep,
    date_range: DateRangeDep,
) -> APIResponse[ProjectProgressResponse]:
    """Completion, SLA breaches and staleness of one project."""
    snapshot = await load_snapshot(client, date_range)
    project = snapshot.project(project_id)
    if project is None:
        raise NotFoundError("Project", project_id)

    progress = engine.project_progress(project, snapshot.tickets)
    return APIResponse(data=ProjectProgressResponse.model_validate(progress))


@router.get("/rollbacks/audit", response_model=APIResponse[RollbackAuditResponse])
async def get_rollback_audit(
    client: TrackerClientDep,
    engine: EngineDep,
    date_range: DateRangeDep,
) -> APIResponse[RollbackAuditResponse]:
    """Rollback movements split into justified and pending."""
    rollbacks = await client.get_rollbacks(date_range)
    audit = engine.rollback_audit(rollbacks)
    return APIResponse(data=RollbackAuditResponse.model_validate(audit))
