"""Application factory for the FastAPI backend."""
from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, get_settings
from .database import Database
from .errors import SocialError, UpstreamFailure
from .routers import (
    auth_router,
    business_router,
    messages_router,
    posts_router,
    profiles_router,
    system_router,
)
from .services import CleanupWorker, MediaHost, SpacesMediaHost, build_services

logger = logging.getLogger(__name__)


async def _social_error_handler(request: Request, exc: SocialError) -> JSONResponse:
    if exc.retryable:
        logger.warning("%s %s failed upstream: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "error": exc.kind},
    )


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("%s %s failed in the database", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=UpstreamFailure.status_code,
        content={"success": False, "message": UpstreamFailure.default_message, "error": UpstreamFailure.kind},
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid request", "error": "invalid_input"},
    )


def create_app(settings: Settings | None = None, *, media_host: MediaHost | None = None) -> FastAPI:
    """Build the application with its own database, services and cleanup task."""

    settings = settings or get_settings()
    logging.getLogger("socialfeed").setLevel(settings.log_level.upper())

    database = Database(settings.database_url)
    services = build_services(settings, database, media_host or SpacesMediaHost())
    cleanup = CleanupWorker(services.sessions, interval=timedelta(minutes=settings.cleanup_interval_minutes))

    app = FastAPI(title=settings.app_name, version=settings.api_version)
    app.state.services = services

    # Cookies only travel cross-origin with explicit origins, never "*".
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SocialError, _social_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)

    app.include_router(system_router)
    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(business_router)
    app.include_router(messages_router)
    app.include_router(profiles_router)

    @app.on_event("startup")
    async def _startup() -> None:
        """Ensure database schema and background tasks are ready before serving."""

        try:
            database.init_db()
        except Exception:  # pragma: no cover - best effort logging
            logger.exception("Database initialisation failed")
            raise
        logger.info("%s %s ready", settings.app_name, settings.api_version)

        if settings.disable_cleanup:
            logger.info("Background cleanup disabled")
            return
        cleanup.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        """Stop background tasks and release pooled connections."""

        if not settings.disable_cleanup:
            await cleanup.stop()
        database.dispose()

    return app


__all__ = ["create_app"]
