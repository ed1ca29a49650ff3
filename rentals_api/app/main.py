"""
Main entrypoint for the Rentals API.

This module assembles the FastAPI application, sets up logging,
registers error handlers and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served with
uvicorn::

    uvicorn rentals_api.app.main:app --reload

The rental store and the service on top of it are created once per
application and kept on ``app.state``; routes reach them through the
``get_rental_service`` dependency.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import get_database_path, init_db
from .core.logging_config import setup_logging
from .repositories.rental_repository import SqliteRentalRepository
from .services.rental_service import RentalService


logger = logging.getLogger(__name__)


def create_app(database_path: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database_path : Optional[str]
        SQLite file backing the rental store.  Defaults to
        ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    db_path = get_database_path(database_path)
    repository = SqliteRentalRepository(db_path, timeout=settings.sqlite_timeout)
    app.state.rental_service = RentalService(
        repository, status_change_attempts=settings.status_change_attempts
    )

    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed payloads, UUIDs or timestamps are client errors (400).
        logger.warning("Invalid request %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db(db_path)
        logger.info("Rental store ready at %s", db_path)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        logger.info("Rentals API shutting down")
        app.state.rental_service = None

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Return validation errors without the non‑serialisable ``ctx`` values."""
    return [
        {key: value for key, value in err.items() if key in {"type", "loc", "msg"}}
        for err in exc.errors()
    ]


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
