"""Fetch layer - concurrent reads from the ticket-tracker backend."""

from govboard.fetch.client import PATHS, TrackerClient, date_range_params
from govboard.fetch.exceptions import CONNECTIVITY_MESSAGE, FetchError
from govboard.fetch.snapshot import DashboardSnapshot, load_snapshot
from govboard.filters import DateRange

__all__ = [
    "CONNECTIVITY_MESSAGE",
    "PATHS",
    "DashboardSnapshot",
    "DateRange",
    "FetchError",
    "TrackerClient",
    "date_range_params",
    "load_snapshot",
]
