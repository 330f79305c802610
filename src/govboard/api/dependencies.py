"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from datetime import date  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from govboard.analytics import AggregationEngine
from govboard.boards import DEFAULT_REGISTRY, BoardRegistry
from govboard.config import Settings, load_settings
from govboard.fetch import TrackerClient
from govboard.filters import DateRange

# Global TrackerClient instance (initialized on app startup)
_tracker_client: TrackerClient | None = None


def init_tracker_client(settings: Settings | None = None) -> TrackerClient:
    """Initialize the global TrackerClient instance."""
    global _tracker_client  # noqa: PLW0603
    _tracker_client = TrackerClient.from_settings(settings or load_settings())
    return _tracker_client


async def close_tracker_client() -> None:
    """Close the global TrackerClient instance."""
    global _tracker_client  # noqa: PLW0603
    if _tracker_client is not None:
        await _tracker_client.close()
        _tracker_client = None


def get_tracker_client() -> Generator[TrackerClient, None, None]:
    """Dependency that provides the TrackerClient instance."""
    if _tracker_client is None:
        raise RuntimeError("TrackerClient not initialized. Call init_tracker_client() first.")
    yield _tracker_client


# Type alias for dependency injection
TrackerClientDep = Annotated[TrackerClient, Depends(get_tracker_client)]


def get_registry() -> BoardRegistry:
    """Dependency that provides the board registry."""
    return DEFAULT_REGISTRY


RegistryDep = Annotated[BoardRegistry, Depends(get_registry)]


def get_engine(registry: RegistryDep) -> AggregationEngine:
    """Dependency that provides an AggregationEngine over the registry."""
    return AggregationEngine(registry)


EngineDep = Annotated[AggregationEngine, Depends(get_engine)]


def get_date_range(start_date: date | None = None, end_date: date | None = None) -> DateRange:
    """Dependency that builds a DateRange from query parameters.

    Raises:
        FilterError: If start_date is after end_date.
    """
    return DateRange(start_date, end_date)


DateRangeDep = Annotated[DateRange, Depends(get_date_range)]
