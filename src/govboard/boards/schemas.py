"""Per-team board layouts.

Each schema reproduces the column layout of the team's own tracker board,
so layouts intentionally differ between teams. Core Switching folds DevOps,
Security Testing, UAT, CAB and Production Ready into one READY TO DEPLOY
column; the other teams keep them apart.
"""

from __future__ import annotations

from collections.abc import Callable

from govboard.boards.models import BoardColumn, ExactStatus, StageSet, StatusContains

COLORS = {
    "todo": "slate",
    "progress": "blue",
    "blocked": "rose",
    "review": "indigo",
    "devops": "cyan",
    "ready_to_test": "sky",
    "test": "amber",
    "security": "orange",
    "uat": "teal",
    "cab": "violet",
    "prod": "purple",
    "done": "emerald",
}

_TODO = ExactStatus.of("Backlog", "To Do", "Selected for Development", "Open", "New")
_IN_PROGRESS = ExactStatus.of("In Progress")
_BLOCKED = ExactStatus.of("Blocked", "On Hold", "Impediment")
_REVIEW = ExactStatus.of("Review", "In Review", "Code Review", "Peer Review")
_DEVOPS = ExactStatus.of("DevOps")
_READY_TO_TEST = ExactStatus.of(
    "Ready to Test", "Ready For Test", "Ready to Deploy (Test)", "Ready to Deploy ( Test)"
)
_IN_TEST = ExactStatus.of("In Test", "QA Test", "QA", "Test", "Testing")
_SECURITY = StatusContains.of("security")
_UAT = ExactStatus.of("UAT", "User Acceptance Testing")
_PRODUCTION_READY = ExactStatus.of("Production Ready", "Ready to Deploy")
_DONE = ExactStatus.of("Done", "Live", "Completed", "Closed", "Released")


def _col(
    label: str, color: str, sprint: Callable[[str], bool], *stages: int
) -> BoardColumn:
    return BoardColumn(
        label=label,
        color=COLORS[color],
        sprint_matcher=sprint,
        stage_matcher=StageSet.of(*stages),
    )


COLLECTIONS = (
    _col("TODO", "todo", _TODO, 0),
    _col("In Progress", "progress", _IN_PROGRESS, 1),
    _col("BLOCKED", "blocked", _BLOCKED, 2),
    _col("Review", "review", _REVIEW, 3),
    _col("DEVOPS", "devops", _DEVOPS, 4),
    _col("READY TO TEST", "ready_to_test", _READY_TO_TEST, 5),
    _col("IN TEST", "test", _IN_TEST, 6),
    _col("UAT", "uat", _UAT, 8),
    _col("SECURITY TESTING", "security", _SECURITY, 7),
    _col(
        "CAB READY",
        "cab",
        ExactStatus.of(
            "CAB READY",
            "CAB",
            "INTEGRATION ( CERTIFICATION)",
            "Integration (Certification)",
            "Certification",
            "CAB-READY",
        ),
        9,
    ),
    _col("PRODUCTION READY", "prod", _PRODUCTION_READY, 10),
    _col("DONE", "done", _DONE, 11),
)

DATA_AND_IDENTITY = (
    _col("TODO", "todo", _TODO, 0),
    _col("In Progress", "progress", _IN_PROGRESS, 1),
    _col("BLOCKED", "blocked", _BLOCKED, 2),
    _col("Review", "review", _REVIEW, 3),
    _col("DEVOPS", "devops", _DEVOPS, 4),
    _col("READY TO TEST", "ready_to_test", _READY_TO_TEST, 5),
    _col("QA TEST", "test", _IN_TEST, 6),
    _col("SECURITY TESTING", "security", _SECURITY, 7),
    _col("UAT", "uat", _UAT, 8),
    _col(
        "CAB-READY",
        "cab",
        ExactStatus.of(
            "CAB READY", "CAB", "CAB-READY", "Certification", "INTEGRATION ( CERTIFICATION)"
        ),
        9,
    ),
    _col("PRODUCTION-READY", "prod", _PRODUCTION_READY, 10),
    _col("LIVE", "done", _DONE, 11),
)

CORE_SWITCHING = (
    _col(
        "UP NEXT",
        "todo",
        ExactStatus.of("Backlog", "To Do", "Selected for Development", "Open", "New", "Up Next"),
        0,
    ),
    _col("In Progress", "progress", _IN_PROGRESS, 1),
    _col("BLOCKED", "blocked", _BLOCKED, 2),
    _col("Review", "review", _REVIEW, 3),
    _col("READY TO TEST", "ready_to_test", _READY_TO_TEST, 5),
    _col("TEST", "test", _IN_TEST, 6),
    _col(
        "READY TO DEPLOY",
        "prod",
        ExactStatus.of(
            "Certification",
            "CAB READY",
            "CAB",
            "Ready to Deploy",
            "Production Ready",
            "DevOps",
            "Security Testing",
            "UAT",
        ),
        4,
        7,
        8,
        9,
        10,
    ),
    _col("DONE", "done", _DONE, 11),
)

ENTERPRISE_SOLUTION = (
    _col("TODO", "todo", _TODO, 0),
    _col("In Progress", "progress", _IN_PROGRESS, 1),
    _col("BLOCKED", "blocked", _BLOCKED, 2),
    _col("Review", "review", _REVIEW, 3),
    _col("DEVOPS", "devops", _DEVOPS, 4),
    _col("READY TO TEST", "ready_to_test", _READY_TO_TEST, 5),
    _col("TEST", "test", _IN_TEST, 6),
    _col(
        "CERTIFICATION",
        "cab",
        ExactStatus.of(
            "Certification", "INTEGRATION ( CERTIFICATION)", "Integration (Certification)"
        ),
        9,
    ),
    _col("SECURITY TESTING", "security", _SECURITY, 7),
    # This board labels its UAT lane "CAB READY".
    _col("CAB READY", "uat", ExactStatus.of("CAB READY", "CAB", "CAB-READY", "UAT"), 8),
    _col("PRODUCTION READY", "prod", _PRODUCTION_READY, 10),
    _col("DONE", "done", _DONE, 11),
)

FALLBACK = (
    _col("TODO", "todo", _TODO, 0),
    _col("In Progress", "progress", _IN_PROGRESS, 1),
    _col("BLOCKED", "blocked", ExactStatus.of("Blocked", "On Hold"), 2),
    _col("Review", "review", ExactStatus.of("Review", "In Review"), 3),
    _col("DEVOPS", "devops", _DEVOPS, 4),
    _col("READY TO TEST", "ready_to_test", ExactStatus.of("Ready to Test", "Ready For Test"), 5),
    _col("QA / TEST", "test", ExactStatus.of("Test", "QA", "QA TEST", "IN TEST"), 6),
    _col("SECURITY TESTING", "security", _SECURITY, 7),
    _col("UAT", "uat", _UAT, 8),
    _col("CAB / CERT", "cab", ExactStatus.of("CAB READY", "Certification", "CAB"), 9),
    _col("PRODUCTION READY", "prod", _PRODUCTION_READY, 10),
    _col("LIVE / DONE", "done", ExactStatus.of("Done", "Live", "Completed"), 11),
)

TEAM_SCHEMAS: dict[str, tuple[BoardColumn, ...]] = {
    "Collections": COLLECTIONS,
    "Data & Identity": DATA_AND_IDENTITY,
    "Core Switching": CORE_SWITCHING,
    "Enterprise Solution": ENTERPRISE_SOLUTION,
}

# Name variants stored upstream.
TEAM_ALIASES: dict[str, str] = {
    "Enterprise Solutions": "Enterprise Solution",
}

TRACKER_PREFIXES: dict[str, str] = {
    "SKP": "Collections",
    "IR": "Data & Identity",
    "CASP": "Core Switching",
    "BARP3": "Enterprise Solution",
}
