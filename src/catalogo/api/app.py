"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogo import __version__
from catalogo.api.dependencies import close_catalog, init_catalog
from catalogo.api.models import APIResponse
from catalogo.api.routes import courses, enrollments, instructors, students
from catalogo.config import Settings
from catalogo.graph import InvalidGraphOperationError
from catalogo.logging import get_logger, setup_logging
from catalogo.store import (
    CatalogStoreError,
    ConflictError,
    DuplicateEnrollmentError,
    NotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings = app.state.settings if hasattr(app.state, "settings") else Settings.from_env()
    init_catalog(settings)
    logger.info("Catalogo API %s started", __version__)
    yield
    # Shutdown
    close_catalog()
    logger.info("Catalogo API stopped")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map catalog errors to HTTP responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(ConflictError)
    async def conflict_handler(_request: Request, exc: ConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(DuplicateEnrollmentError)
    async def duplicate_enrollment_handler(
        _request: Request, exc: DuplicateEnrollmentError
    ) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(InvalidGraphOperationError)
    async def invalid_graph_handler(
        _request: Request, exc: InvalidGraphOperationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(CatalogStoreError)
    async def store_error_handler(_request: Request, _exc: CatalogStoreError) -> JSONResponse:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Without explicit settings (e.g. `uvicorn --factory catalogo.api.app:create_app`),
    settings come from the CATALOGO_* environment and logging is set up from them.
    """
    if settings is None:
        settings = Settings.from_env()
        setup_logging(settings)

    app = FastAPI(
        title="Catalogo API",
        description="REST API for Catalogo - Course Catalog and Enrollment Service",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(instructors.router, prefix="/api/v1")
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(enrollments.router, prefix="/api/v1")

    return app


def run() -> None:
    """Run the API server with settings from the environment."""
    settings = Settings.from_env()
    setup_logging(settings)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
