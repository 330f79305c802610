"""Canonical workflow stages and priority levels."""

from __future__ import annotations

from enum import IntEnum


class CanonicalStage(IntEnum):
    """Ordered canonical pipeline stage.

    0..11 is the happy path; ROLLBACK marks a regression and is reachable
    from any of 1..11.
    """

    TO_DO = 0
    IN_PROGRESS = 1
    BLOCKED = 2
    REVIEW = 3
    DEVOPS = 4
    READY_TO_TEST = 5
    QA_TEST = 6
    SECURITY_TESTING = 7
    UAT = 8
    CAB_READY = 9
    PRODUCTION_READY = 10
    LIVE = 11
    ROLLBACK = 12


class Priority(IntEnum):
    """Three-level priority ordinal."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2


STAGE_LABELS: dict[int, str] = {
    CanonicalStage.TO_DO: "To Do",
    CanonicalStage.IN_PROGRESS: "In Progress",
    CanonicalStage.BLOCKED: "Blocked",
    CanonicalStage.REVIEW: "Review",
    CanonicalStage.DEVOPS: "DevOps",
    CanonicalStage.READY_TO_TEST: "Ready to Test",
    CanonicalStage.QA_TEST: "QA/Test",
    CanonicalStage.SECURITY_TESTING: "Security Testing",
    CanonicalStage.UAT: "UAT",
    CanonicalStage.CAB_READY: "CAB Ready",
    CanonicalStage.PRODUCTION_READY: "Production Ready",
    CanonicalStage.LIVE: "Live/Done",
    CanonicalStage.ROLLBACK: "Rollback",
}

PENDING_LABEL = "Pending Classification"

_PRIORITY_LABELS: dict[int, str] = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
}


def stage_label(stage: int) -> str:
    """Authoritative label for a stage; out-of-range values are pending."""
    return STAGE_LABELS.get(stage, PENDING_LABEL)


def priority_label(level: int) -> str:
    """Label for a priority ordinal, Medium when out of range."""
    return _PRIORITY_LABELS.get(level, "Medium")
