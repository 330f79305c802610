"""Health check endpoint."""

from fastapi import APIRouter

from govboard import __version__
from govboard.api.models import APIResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=APIResponse[HealthResponse])
def health() -> APIResponse[HealthResponse]:
    """Liveness check; does not contact the tracker backend."""
    return APIResponse(data=HealthResponse(status="ok", version=__version__))
