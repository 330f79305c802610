"""Unit tests for team board routes."""

import pytest
from fastapi import status


def _lane(data: dict, label: str) -> dict:
    return next(lane for lane in data["lanes"] if lane["label"] == label)


@pytest.mark.unit
class TestGetSchema:
    """Tests for GET /teams/{team_id}/schema."""

    def test_schema(self, client) -> None:
        response = client.get("/api/v1/teams/1/schema")

        assert response.status_code == status.HTTP_200_OK
        columns = response.json()["data"]
        assert len(columns) == 12
        assert columns[0]["label"] == "TODO"
        assert columns[-1]["label"] == "DONE"

    def test_unknown_team(self, client) -> None:
        response = client.get("/api/v1/teams/9/schema")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Team not found"


@pytest.mark.unit
class TestGetBoard:
    """Tests for GET /teams/{team_id}/board."""

    def test_execution_board(self, client) -> None:
        response = client.get("/api/v1/teams/1/board")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["team"] == "Collections"
        assert data["view"] == "execution"
        assert len(data["lanes"]) == 10
        assert data["lanes"][0]["label"] == "In Progress"
        assert [t["id"] for t in data["backlog"]] == ["100", "105"]
        assert [t["id"] for t in data["completed"]] == ["103"]
        assert _lane(data, "IN TEST")["count"] == 1
        assert data["unmatched"] == []

    def test_ticket_annotation_in_response(self, client) -> None:
        data = client.get("/api/v1/teams/1/board").json()["data"]

        ticket = _lane(data, "IN TEST")["tickets"][0]
        assert ticket["jira_key"] == "SKP-3"
        assert ticket["stage"] == 6
        assert ticket["stage_label"] == "QA/Test"
        assert ticket["priority_label"] == "Medium"

    def test_other_teams_tickets_excluded(self, client) -> None:
        data = client.get("/api/v1/teams/2/board").json()["data"]

        assert data["team"] == "Core Switching"
        assert _lane(data, "Review")["count"] == 1
        assert data["backlog"] == []

    def test_sprint_board(self, client) -> None:
        data = client.get("/api/v1/teams/1/board", params={"view": "sprint"}).json()["data"]

        assert data["view"] == "sprint"
        assert len(data["lanes"]) == 12
        assert _lane(data, "TODO")["count"] == 1
        assert _lane(data, "DONE")["count"] == 1
        assert [t["id"] for t in data["unmatched"]] == ["105"]
        assert data["backlog"] == []

    def test_search(self, client) -> None:
        data = client.get("/api/v1/teams/1/board", params={"search": "skp-4"}).json()["data"]

        assert [t["id"] for t in data["completed"]] == ["103"]
        assert data["backlog"] == []

    def test_project_filter(self, client) -> None:
        data = client.get("/api/v1/teams/1/board", params={"project_id": "20"}).json()["data"]

        assert all(lane["count"] == 0 for lane in data["lanes"])
        assert data["backlog"] == []

    def test_unknown_project(self, client) -> None:
        response = client.get("/api/v1/teams/1/board", params={"project_id": "77"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unknown_team(self, client) -> None:
        response = client.get("/api/v1/teams/9/board")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_view(self, client) -> None:
        response = client.get("/api/v1/teams/1/board", params={"view": "kanban"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
