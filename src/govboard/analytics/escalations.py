"""Support-tier escalation transitions.

Tickets move between support tiers L1..L4. Moving to a higher tier is an
escalation; moving back down is a de-escalation, which the escalation view
does not display.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from govboard.analytics.models import EscalationView, TransitionKind
from govboard.filters import FilterError

if TYPE_CHECKING:
    from govboard.records import Movement

logger = logging.getLogger(__name__)

DEESCALATION_MESSAGE = "The system does not show de-escalations, please pick other levels."

_TIER = re.compile(r"^L([1-4])$", re.IGNORECASE)


def parse_tier(level: str | int | None) -> int | None:
    """Parse "L1".."L4" (or 1..4) into 1..4, None for anything else."""
    if level is None or isinstance(level, bool):
        return None
    if isinstance(level, int):
        return level if 1 <= level <= 4 else None
    match = _TIER.match(level.strip())
    return int(match.group(1)) if match else None


def classify_transition(from_level: str | int | None, to_level: str | int | None) -> TransitionKind:
    """Direction of a tier transition; UNKNOWN when either tier is missing."""
    source = parse_tier(from_level)
    target = parse_tier(to_level)
    if source is None or target is None:
        return TransitionKind.UNKNOWN
    if target > source:
        return TransitionKind.ESCALATION
    if target < source:
        return TransitionKind.DE_ESCALATION
    return TransitionKind.LATERAL


def _tier_filter(level: str | int | None, name: str) -> int | None:
    if level is None or (isinstance(level, str) and not level.strip()):
        return None
    tier = parse_tier(level)
    if tier is None:
        raise FilterError(f"Unknown support tier for {name}: {level!r}, expected L1..L4")
    return tier


def escalation_view(
    movements: Iterable[Movement],
    from_level: str | int | None = None,
    to_level: str | int | None = None,
) -> EscalationView:
    """Build the escalation list for a from/to tier filter.

    A filter that itself describes a de-escalation (both tiers set and from
    above to) is refused with DEESCALATION_MESSAGE. Otherwise movements
    matching the filter are listed, and every individual de-escalation is
    left out and counted in ``excluded``.

    Args:
        movements: Tier movements.
        from_level: Source-tier filter, None for all levels.
        to_level: Target-tier filter, None for all levels.

    Raises:
        FilterError: If a non-empty filter is not a tier L1..L4.
    """
    source_filter = _tier_filter(from_level, "from_level")
    target_filter = _tier_filter(to_level, "to_level")

    if source_filter is not None and target_filter is not None and source_filter > target_filter:
        logger.info("Refusing de-escalation view L%d -> L%d", source_filter, target_filter)
        return EscalationView(deescalation=True, message=DEESCALATION_MESSAGE)

    view = EscalationView()
    for movement in movements:
        if source_filter is not None and parse_tier(movement.from_level) != source_filter:
            continue
        if target_filter is not None and parse_tier(movement.to_level) != target_filter:
            continue
        kind = classify_transition(movement.from_level, movement.to_level)
        if kind is TransitionKind.DE_ESCALATION:
            view.excluded += 1
            continue
        view.items.append(movement)

    if view.excluded:
        logger.debug("Excluded %d de-escalation movement(s)", view.excluded)
    return view
