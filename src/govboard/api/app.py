"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from govboard import __version__
from govboard.api.dependencies import close_tracker_client, init_tracker_client
from govboard.api.exceptions import NotFoundError
from govboard.api.models import APIResponse
from govboard.api.routes import analytics, boards, escalations, health, stages
from govboard.config import load_settings
from govboard.fetch import CONNECTIVITY_MESSAGE, FetchError
from govboard.filters import FilterError
from govboard.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from govboard.config import Settings

logger = logging.getLogger("govboard.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings = getattr(app.state, "settings", None) or load_settings()
    setup_logging(settings)
    client = init_tracker_client(settings)
    logger.info("Tracker backend at %s", client.base_url)

    yield
    # Shutdown
    await close_tracker_client()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Governance Board API",
        description="Canonical stages, team boards and delivery analytics over tracker data",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    if settings is not None:
        app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error=f"{exc.kind} not found").model_dump(),
        )

    @app.exception_handler(FilterError)
    async def filter_error_handler(_request: Request, exc: FilterError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(FetchError)
    async def fetch_error_handler(_request: Request, exc: FetchError) -> JSONResponse:
        logger.warning("Upstream fetch failed: %s", exc.__cause__ or exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=APIResponse[None](data=None, error=CONNECTIVITY_MESSAGE).model_dump(),
        )

    # Include routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(stages.router, prefix="/api/v1")
    app.include_router(analytics.router, prefix="/api/v1")
    app.include_router(boards.router, prefix="/api/v1")
    app.include_router(escalations.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
