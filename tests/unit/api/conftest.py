"""Fixtures for REST API tests."""

from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from govboard.api import create_app
from govboard.api.dependencies import get_tracker_client
from govboard.fetch import TrackerClient

BASE_URL = "http://tracker.test/api"


@pytest.fixture
def make_app(make_transport) -> Callable[..., FastAPI]:
    """Factory for an app whose tracker client talks to a fake backend."""

    def factory(payloads: dict[str, Any], failing: tuple[str, ...] = ()) -> FastAPI:
        app = create_app()
        tracker = TrackerClient(BASE_URL, transport=make_transport(payloads, failing=failing))

        def override_get_tracker_client():
            yield tracker

        app.dependency_overrides[get_tracker_client] = override_get_tracker_client
        return app

    return factory


@pytest.fixture
def client(make_app, tracker_payloads) -> Iterator[TestClient]:
    """Test client over the default fake backend."""
    with TestClient(make_app(tracker_payloads), raise_server_exceptions=False) as client:
        yield client
