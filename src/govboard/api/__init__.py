"""REST API for govboard."""

from govboard.api.app import create_app
from govboard.api.models import (
    AnalyticsResponse,
    APIResponse,
    BoardResponse,
    EscalationViewResponse,
    TicketResponse,
)

__all__ = [
    "APIResponse",
    "AnalyticsResponse",
    "BoardResponse",
    "EscalationViewResponse",
    "TicketResponse",
    "create_app",
]
