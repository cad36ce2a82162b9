"""Database initialization and dependency injection."""

from typing import AsyncGenerator, Optional

import fastapi
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.user.models
import components.cliente.models
import components.solicitud.models
import components.prestamo.models
import components.pago.models


async def get_db(request: fastapi.Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    db_manager: DatabaseManager = request.app.state.db_manager
    async with db_manager.get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI, db_manager: Optional[DatabaseManager] = None) -> DatabaseManager:
    """Attach a DatabaseManager to the app."""
    app.state.db_manager = db_manager or DatabaseManager()
    return app.state.db_manager
