"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from govboard.fetch import TrackerClient
from govboard.records import Project, Team, Ticket, annotate


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture(autouse=True)
def _reset_govboard_logger():
    """Detach handlers an app lifespan or logging test installed."""
    yield
    logger = logging.getLogger("govboard")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_ticket() -> Callable[..., Ticket]:
    """Factory for annotated tickets; keyword arguments override Ticket fields."""
    counter = iter(range(1, 10_000))

    def factory(**fields: Any) -> Ticket:
        fields.setdefault("id", f"t{next(counter)}")
        return annotate(Ticket(**fields))

    return factory


@pytest.fixture
def collections_team() -> Team:
    return Team(id="1", name="Collections", prefix="SKP")


@pytest.fixture
def switching_team() -> Team:
    return Team(id="2", name="Core Switching", prefix="CASP")


@pytest.fixture
def projects() -> list[Project]:
    """One project per team, with stale-looking aggregates on the first."""
    return [
        Project(
            id="p1",
            name="Direct Debit",
            jira_key="DD",
            team_id="1",
            planned_points=40,
            completed_points=10,
        ),
        Project(id="p2", name="Switch Upgrade", jira_key="SWU", team_id="2"),
    ]


BASE_URL = "http://tracker.test/api"


@pytest.fixture
def tracker_payloads() -> dict[str, Any]:
    """Backend JSON keyed by request path (below the /api base)."""
    return {
        "/teams": [
            {"id": 1, "name": "Collections", "prefix": "SKP"},
            {"id": 2, "name": "Core Switching", "prefix": "CASP"},
        ],
        "/projects": {
            "items": [
                {"id": 10, "name": "Direct Debit", "jiraKey": "DD", "teamId": 1},
                {"id": 20, "name": "Switch Upgrade", "jiraKey": "SWU", "teamId": 2},
            ]
        },
        "/tickets": [
            {"id": 100, "jiraKey": "SKP-1", "status": "Backlog", "projectId": 10},
            {"id": 101, "jiraKey": "SKP-2", "status": "In Progress", "projectId": 10},
            {"id": 102, "jiraKey": "SKP-3", "Status": "QA Test", "projectId": 10},
            {"id": 103, "jiraKey": "SKP-4", "status": "Done", "projectId": 10},
            {"id": 104, "jiraKey": "CASP-1", "status": "Code Review", "projectId": 20},
            {"id": 105, "jiraKey": "SKP-5", "status": "Mystery", "projectId": 10},
        ],
        "/incidents/l4": [{"id": 7, "team": "Collections", "resolvedAt": "2024-03-01T10:00:00"}],
        "/tickets/movements": [
            {"id": 1, "ticketId": 100, "fromLevel": "L1", "toLevel": "L2"},
            {"id": 2, "ticketId": 101, "fromLevel": "L3", "toLevel": "L1"},
        ],
        "/tickets/rollbacks": [
            {"id": 9, "ticketId": 103, "justification": "Settlement mismatch"},
        ],
    }


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for a MockTransport serving payloads; listed paths answer 500."""

    def factory(
        payloads: dict[str, Any],
        failing: tuple[str, ...] = (),
        seen: list[httpx.Request] | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            path = request.url.path.removeprefix("/api")
            if path in failing:
                return httpx.Response(500, text="upstream exploded")
            if path not in payloads:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=payloads[path])

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def tracker(make_transport, tracker_payloads) -> TrackerClient:
    """TrackerClient backed by the default fake backend."""
    return TrackerClient(BASE_URL, transport=make_transport(tracker_payloads))
