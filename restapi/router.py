"""Application configuration and router setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import fastapi
from fastapi.middleware import cors

from components.core import init_db
from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.logging import setup_logging
from restapi.endpoints import auth, clientes, dashboard, health_check, pagos, prestamos, solicitudes
from restapi.errors import register_exception_handlers

logger = logging.getLogger(__name__)


def create_app(db_manager: Optional[DatabaseManager] = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI):
        if settings.CREATE_TABLES_ON_STARTUP:
            await app.state.db_manager.create_tables()
        logger.info("%s iniciado", settings.PROJECT_NAME)
        yield
        await app.state.db_manager.dispose()

    app = fastapi.FastAPI(
        title=settings.PROJECT_NAME,
        description="Back office de clientes, solicitudes, préstamos y pagos",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    # Initialize database
    init_db.init_db(app, db_manager)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_check.router)
    for module in (auth, clientes, solicitudes, prestamos, pagos, dashboard):
        app.include_router(module.router, prefix=settings.API_PREFIX)

    return app
