"""Team board endpoints."""

from enum import Enum

from fastapi import APIRouter

from govboard.api.dependencies import DateRangeDep, RegistryDep, TrackerClientDep
from govboard.api.exceptions import NotFoundError
from govboard.api.models import (
    APIResponse,
    BoardResponse,
    ColumnResponse,
    LaneResponse,
    ticket_to_response,
)
from govboard.boards import BoardLane
from govboard.fetch import load_snapshot
from govboard.filters import FilterPipeline

router = APIRouter(prefix="/teams", tags=["boards"])


class BoardView(str, Enum):
    """Board projection: canonical-stage execution lanes or raw-status sprint lanes."""

    EXECUTION = "execution"
    SPRINT = "sprint"


def _lane(lane: BoardLane) -> LaneResponse:
    return LaneResponse(
        label=lane.label,
        color=lane.column.color,
        count=len(lane.tickets),
        tickets=[ticket_to_response(t) for t in lane.tickets],
    )


@router.get("/{team_id}/schema", response_model=APIResponse[list[ColumnResponse]])
async def get_schema(
    team_id: str, client: TrackerClientDep, registry: RegistryDep
) -> APIResponse[list[ColumnResponse]]:
    """Ordered board columns for a team."""
    teams = await client.get_teams()
    team = next((t for t in teams if t.id == team_id), None)
    if team is None:
        raise NotFoundError("Team", team_id)
    columns = registry.get_schema(team.name)
    return APIResponse(data=[ColumnResponse(label=c.label, color=c.color) for c in columns])


@router.get("/{team_id}/board", response_model=APIResponse[BoardResponse])
async def get_board(
    team_id: str,
    client: TrackerClientDep,
    registry: RegistryDep,
    date_range: DateRangeDep,
    view: BoardView = BoardView.EXECUTION,
    project_id: str | None = None,
    search: str | None = None,
) -> APIResponse[BoardResponse]:
    """Project a team's tickets onto its sprint or execution board."""
    snapshot = await load_snapshot(client, date_range)
    team = snapshot.team(team_id)
    if team is None:
        raise NotFoundError("Team", team_id)
    if project_id is not None and snapshot.project(project_id) is None:
        raise NotFoundError("Project", project_id)

    pipeline = (
        FilterPipeline()
        .by_team(team, snapshot.projects, registry)
        .by_projects([project_id] if project_id else None)
        .by_search(search)
    )
    tickets = pipeline.apply(snapshot.tickets)

    if view is BoardView.SPRINT:
        sprint = registry.sprint_board(team.name, tickets)
        return APIResponse(
            data=BoardResponse(
                team=sprint.team,
                view=view.value,
                lanes=[_lane(lane) for lane in sprint.lanes],
                unmatched=[ticket_to_response(t) for t in sprint.unmatched],
            )
        )

    board = registry.execution_board(team.name, tickets)
    return APIResponse(
        data=BoardResponse(
            team=board.team,
            view=view.value,
            lanes=[_lane(lane) for lane in board.lanes],
            backlog=[ticket_to_response(t) for t in board.backlog],
            completed=[ticket_to_response(t) for t in board.completed],
            rollbacks=[ticket_to_response(t) for t in board.rollbacks],
        )
    )
