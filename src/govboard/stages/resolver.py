"""Resolution of raw tracker statuses and priorities onto canonical values.

Trackers emit statuses as integers, numeric strings, enum names
("READY_TO_TEST") and free text ("Ready to Deploy ( Test)"). Strings are
normalized by upper-casing and stripping every non-alphanumeric character,
then tested against an ordered rule table from the highest stage down. The
first matching rule wins: several alias sets overlap, and a status mentioning
security must land on Security Testing even when it also reads like a QA
status.

Unmatched values resolve to To Do. ``StageResolver`` counts those fallback
hits so upstream data-quality problems stay visible without changing the
returned stage.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Callable
from typing import Any

from govboard.stages.models import CanonicalStage, Priority

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Z0-9]")

StatusRule = tuple[Callable[[str], bool], CanonicalStage]


def _one_of(*aliases: str) -> Callable[[str], bool]:
    names = frozenset(aliases)
    return lambda s: s in names


def _security(s: str) -> bool:
    return "SECURITY" in s or s == "PENETRATIONTEST"


# Highest stage first. Order is significant.
_STAGE_RULES: tuple[StatusRule, ...] = (
    (_one_of("ROLLBACK", "ROLLEDBACK"), CanonicalStage.ROLLBACK),
    (_one_of("LIVE", "DONE", "COMPLETED", "CLOSED", "RELEASED"), CanonicalStage.LIVE),
    (
        _one_of(
            "PRODUCTIONREADY",
            "READYTODEPLOY",
            "READYTODELIVER",
            "READYTODEPLOYPROD",
            "APPROVEDFORPRODUCTION",
        ),
        CanonicalStage.PRODUCTION_READY,
    ),
    (
        _one_of(
            "CABREADY",
            "CAB",
            "CERTIFICATION",
            "INTEGRATIONCERTIFICATION",
            "CERTIFICATIONREADY",
            "READYFORDEPLOY",
            "APPROVEDFORDEPLOY",
        ),
        CanonicalStage.CAB_READY,
    ),
    (_one_of("UAT", "USERACCEPTANCETESTING", "ACCEPTANCETESTING"), CanonicalStage.UAT),
    (_security, CanonicalStage.SECURITY_TESTING),
    (
        _one_of(
            "QATEST",
            "QA",
            "QUALITYASSURANCE",
            "INTEST",
            "INTESTING",
            "TEST",
            "TESTING",
            "SYSTEMTEST",
            "STEST",
        ),
        CanonicalStage.QA_TEST,
    ),
    (
        _one_of(
            "READYTOTEST",
            "READYFORTESTING",
            "READYFORTEST",
            "READYTODEPLOYTEST",
            "READYFORQA",
            "READYFORTESTENV",
        ),
        CanonicalStage.READY_TO_TEST,
    ),
    (_one_of("DEVOPS", "DEVOPSREVIEW", "DEPLOYMENTREADY"), CanonicalStage.DEVOPS),
    (
        _one_of("REVIEW", "INREVIEW", "CODEREVIEW", "PEERREVIEW", "TECHNICALREVIEW"),
        CanonicalStage.REVIEW,
    ),
    (_one_of("BLOCKED", "IMPEDIMENT", "ONHOLD"), CanonicalStage.BLOCKED),
    (
        _one_of(
            "INPROGRESS",
            "PROGRESS",
            "DOING",
            "INDEVELOPMENT",
            "DEVELOPMENT",
            "ACTIVE",
            "STARTED",
            "WORKINGON",
        ),
        CanonicalStage.IN_PROGRESS,
    ),
    (
        _one_of(
            "TODO",
            "BACKLOG",
            "OPEN",
            "NEW",
            "SELECTEDFORDEVELOPMENT",
            "SELECTEDFORDEV",
            "SELECTED",
            "TOBESTARTED",
            "READYFORDEVELOPMENT",
            "APPROVED",
            "PLANNED",
            "REFINED",
        ),
        CanonicalStage.TO_DO,
    ),
)

_PRIORITY_NAMES = {
    "LOW": Priority.LOW,
    "MEDIUM": Priority.MEDIUM,
    "HIGH": Priority.HIGH,
}


def normalize_status(raw: str) -> str:
    """Upper-case a status and strip every non-alphanumeric character."""
    return _NON_ALNUM.sub("", raw.upper())


def _digits(text: str) -> int | None:
    """Integer value of an ASCII digit string, None for anything else."""
    if not (text.isascii() and text.isdigit()):
        return None
    try:
        return int(text)
    except ValueError:
        # longer than the interpreter's int conversion limit
        return None


def _match_stage(raw: Any) -> int | None:
    """Return the stage for raw, or None when only the default would apply."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None

    text = str(raw).strip()
    value = _digits(text)
    if value is not None:
        return value

    normalized = normalize_status(text)
    for matches, stage in _STAGE_RULES:
        if matches(normalized):
            return stage
    return None


def resolve_stage(raw: Any) -> int:
    """Resolve any raw status to a canonical stage.

    Integers (and digit-only strings) are returned unchanged without bounds
    checks. Unrecognized values resolve to To Do.
    """
    stage = _match_stage(raw)
    if stage is None:
        return CanonicalStage.TO_DO
    return stage


def resolve_priority(raw: Any) -> int:
    """Resolve a raw priority to Low(0)/Medium(1)/High(2), Medium by default."""
    if raw is None or isinstance(raw, bool):
        return Priority.MEDIUM
    if isinstance(raw, int):
        return raw if raw in (0, 1, 2) else Priority.MEDIUM

    text = str(raw).strip()
    value = _digits(text)
    if value is not None:
        return value if value in (0, 1, 2) else Priority.MEDIUM
    return _PRIORITY_NAMES.get(text.upper(), Priority.MEDIUM)


class StageResolver:
    """Stage resolver that records default-fallback hits.

    Returns exactly what ``resolve_stage`` returns; additionally every value
    that fell through to the To Do default is counted by its normalized form.
    """

    def __init__(self) -> None:
        self.fallback_hits: Counter[str] = Counter()

    def resolve(self, raw: Any) -> int:
        """Resolve a raw status, counting default fallbacks."""
        stage = _match_stage(raw)
        if stage is not None:
            return stage

        key = "" if raw is None else normalize_status(str(raw))
        self.fallback_hits[key] += 1
        logger.debug("Unrecognized status %r resolved to To Do", raw)
        return CanonicalStage.TO_DO

    def resolve_priority(self, raw: Any) -> int:
        """Resolve a raw priority."""
        return resolve_priority(raw)

    @property
    def fallback_total(self) -> int:
        """Total number of default fallbacks seen by this resolver."""
        return sum(self.fallback_hits.values())
