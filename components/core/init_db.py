"""Database initialization and dependency injection."""

from typing import AsyncGenerator, Optional

import fastapi
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.user.models
import components.payment.models


def get_db_manager(request: Request) -> DatabaseManager:
    """Return the DatabaseManager attached to the running app."""
    return request.app.state.db_manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with get_db_manager(request).get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI, db_manager: Optional[DatabaseManager] = None) -> DatabaseManager:
    """Attach a database manager to the app, creating the default one if none is given."""
    db_manager = db_manager or DatabaseManager()
    app.state.db_manager = db_manager
    return db_manager
