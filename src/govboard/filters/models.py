"""Filter value types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from govboard.filters.exceptions import FilterError


def start_bound(value: date | datetime) -> datetime:
    """Inclusive lower bound; a bare date starts at midnight UTC."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    return datetime.combine(value, time.min, tzinfo=UTC)


def end_bound(value: date | datetime) -> datetime:
    """Inclusive upper bound; a bare date covers the whole day."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    return datetime.combine(value, time.max, tzinfo=UTC)


@dataclass(frozen=True)
class DateRange:
    """Optional inclusive date bounds.

    Either bound may be None; a range with neither bound is inactive and
    filters nothing.

    Raises:
        FilterError: If both bounds are set and start is after end.
    """

    start: date | datetime | None = None
    end: date | datetime | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None:
            if start_bound(self.start) > end_bound(self.end):
                raise FilterError(f"Date range start {self.start} is after end {self.end}")

    @property
    def is_active(self) -> bool:
        return self.start is not None or self.end is not None

    def contains(self, moment: datetime | None) -> bool:
        """Inclusive bound test; missing timestamps fall outside an active range."""
        if not self.is_active:
            return True
        if moment is None:
            return False
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        if self.start is not None and moment < start_bound(self.start):
            return False
        if self.end is not None and moment > end_bound(self.end):
            return False
        return True
