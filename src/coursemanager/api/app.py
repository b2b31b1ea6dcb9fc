"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursemanager.api.dependencies import close_database, init_database
from coursemanager.api.exceptions import ServiceResultError
from coursemanager.api.models import APIResponse
from coursemanager.api.routes import courses, departments, enrollments, students
from coursemanager.config import resolve_config
from coursemanager.services import ErrorKind
from coursemanager.store import StoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from coursemanager.config import AppConfig

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: 422,
    ErrorKind.STATE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INFRASTRUCTURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    config: AppConfig | None = getattr(app.state, "config", None)
    if config is None:
        config = resolve_config()

    # Startup
    init_database(
        config.get_db_path(),
        transactional=config.database.transactional,
        policy=config.enrollment,
    )
    logger.info("Database ready at %s", config.get_db_path())

    yield
    # Shutdown
    close_database()


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application config. When None it is resolved at startup from
            coursemanager.yaml or defaults.
    """
    app = FastAPI(
        title="Course Manager API",
        description="REST API for departments, students, courses and enrollments",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.config = config

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ServiceResultError)
    async def service_result_handler(_request: Request, exc: ServiceResultError) -> JSONResponse:
        kind = exc.result.error or ErrorKind.VALIDATION
        return JSONResponse(
            status_code=ERROR_STATUS[kind],
            content=APIResponse[None](data=None, error=exc.result.message).model_dump(),
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(_request: Request, _exc: StoreError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    # Include routers
    app.include_router(departments.router, prefix="/api/v1")
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(enrollments.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
