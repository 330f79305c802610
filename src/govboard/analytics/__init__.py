"""AggregationEngine - workload, points, histograms, correlation, risk and escalations."""

from govboard.analytics.engine import (
    PROJECT_DISTRIBUTION_LIMIT,
    SLA_BREACH_DAYS,
    STALE_DAYS,
    AggregationEngine,
    is_done,
    is_incident_type,
)
from govboard.analytics.escalations import (
    DEESCALATION_MESSAGE,
    classify_transition,
    escalation_view,
    parse_tier,
)
from govboard.analytics.models import (
    AnalyticsReport,
    DistributionEntry,
    EscalationView,
    MovementRollbackCount,
    OverallProgress,
    PointsDelivery,
    ProjectProgress,
    RiskBuckets,
    RollbackAudit,
    StatusCount,
    TeamCorrelation,
    TeamWorkload,
    TransitionKind,
)
from govboard.analytics.ratios import density, percentage, round2, round_half_up

__all__ = [
    "DEESCALATION_MESSAGE",
    "PROJECT_DISTRIBUTION_LIMIT",
    "SLA_BREACH_DAYS",
    "STALE_DAYS",
    "AggregationEngine",
    "AnalyticsReport",
    "DistributionEntry",
    "EscalationView",
    "MovementRollbackCount",
    "OverallProgress",
    "PointsDelivery",
    "ProjectProgress",
    "RiskBuckets",
    "RollbackAudit",
    "StatusCount",
    "TeamCorrelation",
    "TeamWorkload",
    "TransitionKind",
    "classify_transition",
    "density",
    "escalation_view",
    "is_done",
    "is_incident_type",
    "parse_tier",
    "percentage",
    "round2",
    "round_half_up",
]
