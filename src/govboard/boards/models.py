"""Board columns, column matchers and projected boards."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from govboard.records import Ticket


def _fold(text: str) -> str:
    return " ".join(text.split()).lower()


@dataclass(frozen=True)
class ExactStatus:
    """Matches raw status text against known spellings, ignoring case and spacing."""

    values: frozenset[str]

    @classmethod
    def of(cls, *values: str) -> ExactStatus:
        return cls(frozenset(_fold(v) for v in values))

    def __call__(self, raw: str) -> bool:
        return _fold(raw) in self.values


@dataclass(frozen=True)
class StatusContains:
    """Matches raw status text containing any fragment (case-insensitive)."""

    fragments: tuple[str, ...]

    @classmethod
    def of(cls, *fragments: str) -> StatusContains:
        return cls(tuple(f.lower() for f in fragments))

    def __call__(self, raw: str) -> bool:
        lowered = raw.lower()
        return any(f in lowered for f in self.fragments)


@dataclass(frozen=True)
class StageSet:
    """Matches canonical stages by set membership."""

    stages: frozenset[int]

    @classmethod
    def of(cls, *stages: int) -> StageSet:
        return cls(frozenset(stages))

    def __call__(self, stage: int) -> bool:
        return stage in self.stages


@dataclass(frozen=True)
class BoardColumn:
    """One column of a team board.

    Attributes:
        label: Column heading as shown on the team's external board.
        color: Display color token.
        sprint_matcher: Predicate over raw (live) tracker status text.
        stage_matcher: Predicate over canonical stage.
    """

    label: str
    color: str
    sprint_matcher: Callable[[str], bool]
    stage_matcher: Callable[[int], bool]


@dataclass
class BoardLane:
    """A column together with the tickets bucketed into it."""

    column: BoardColumn
    tickets: list[Ticket] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.column.label


@dataclass
class SprintBoard:
    """Tickets bucketed by raw tracker status over every schema column."""

    team: str
    lanes: list[BoardLane] = field(default_factory=list)
    unmatched: list[Ticket] = field(default_factory=list)


@dataclass
class ExecutionBoard:
    """Tickets bucketed by canonical stage over the work-in-progress columns.

    To Do and Done are not lanes; they are reported in the backlog and
    completed panels. Rollback tickets are listed separately.
    """

    team: str
    lanes: list[BoardLane] = field(default_factory=list)
    backlog: list[Ticket] = field(default_factory=list)
    completed: list[Ticket] = field(default_factory=list)
    rollbacks: list[Ticket] = field(default_factory=list)
