"""
FastAPI application factory and configuration.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from message_store.core.access_log import AccessLogMiddleware
from message_store.core.config import Settings, get_settings
from message_store.core.database import Database
from message_store.core.errors import register_error_handlers
from message_store.core.logging import get_logger
from message_store.core.security import SecurityHeadersMiddleware, add_cors
from message_store.api import health, messages


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger = get_logger(__name__)
    logger.info("Starting application...")

    yield

    logger.info("Shutting down application...")


def create_app(settings: Optional[Settings], database: Database) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The database handle is owned by the caller; the app only borrows it
    through `app.state.database`.
    """
    settings = settings or get_settings()
    logger = get_logger(__name__)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Queued chat message store",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    # Middleware added last runs first
    add_cors(app, settings.cors_policy)
    if settings.security_headers:
        app.add_middleware(SecurityHeadersMiddleware)
    if settings.access_log:
        app.add_middleware(AccessLogMiddleware)

    register_error_handlers(app)

    app.include_router(messages.router)
    app.include_router(health.router)

    logger.info(
        "Application created",
        extra={
            "extra_data": {
                "app_name": settings.app_name,
                "version": settings.app_version,
                "debug": settings.debug,
            }
        }
    )

    return app
