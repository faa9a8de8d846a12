"""Application configuration and router setup."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import fastapi
from fastapi import Request, status
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.exceptions import ServiceError
from components.core.log_config import configure_logging
from components.notification.channel import AdminChannel
from restapi.endpoints import admin_socket, auth, health_check, payment

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
    """Create tables on startup and release the engine on shutdown."""
    await app.state.db_manager.create_tables()
    yield
    await app.state.db_manager.dispose()


def create_app(db_manager: Optional[DatabaseManager] = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = fastapi.FastAPI(
        title="Payments API",
        description="Payment tracking with role based access and soft delete",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Storage handle and broadcast channel live on the app, not in module globals
    init_db.init_db(app, db_manager)
    app.state.admin_channel = AdminChannel()

    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "internal server error", "error": str(exc)},
        )

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(payment.router, prefix=settings.API_PREFIX)
    app.include_router(admin_socket.router)

    return app
