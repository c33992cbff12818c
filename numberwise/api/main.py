"""
FastAPI Main Application

Entry point for the Numberwise dashboard API.
"""

import logging
import resource
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .. import __version__
from ..db import Database
from .config import Settings, configure_logging
from .database import database_from_settings, get_database
from .errors import log_error, register_exception_handlers
from .routes import admin_router, dashboard_router
from .schema import create_schema
from .seed import SeedFixture, seed_demo_data

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def initialize_database(database: Database, settings: Settings) -> bool:
    """Create the schema and, when enabled, seed demo data.

    Failures are logged, not raised: the API keeps serving and database
    endpoints fail on their own.

    Returns:
        True if initialization completed
    """
    logger.info("Initializing Numberwise database...")
    try:
        create_schema(database.engine)
        if settings.seed_demo_data:
            seed_demo_data(database.engine, SeedFixture.load(settings.seed_fixture_path))
    except Exception:
        logger.exception("Database initialization failed")
        return False

    logger.info("Database initialized successfully")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Numberwise Dashboard API...")
    initialize_database(app.state.database, app.state.settings)
    yield
    # Shutdown
    logger.info("Shutting down Numberwise Dashboard API...")
    if app.state.owns_database:
        app.state.database.dispose()


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings (read from the environment if omitted)
        database: Database to use (created from settings if omitted; the
            application disposes only databases it created)

    Returns:
        FastAPI application
    """
    if settings is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)

    app = FastAPI(
        title="Numberwise Dashboard API",
        description="Zenvoices and accounting pipeline status per client",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.owns_database = database is None
    app.state.database = database or database_from_settings(settings)
    app.state.started_at = time.monotonic()

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(dashboard_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    @app.api_route("/", methods=["GET", "HEAD"])
    def root():
        """Root endpoint."""
        return {
            "status": "Numberwise Dashboard API is running!",
            "name": "Numberwise Dashboard API",
            "timestamp": _now_iso(),
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "test_db": "/api/test-db",
                "overview": "/api/dashboard/overview",
                "client": "/api/dashboard/client/{clientId}",
                "duplicates": "/api/admin/duplicates",
                "cleanup_duplicates": "/api/admin/cleanup-duplicates",
                "client_count": "/api/admin/client-count",
            },
        }

    @app.api_route("/health", methods=["GET", "HEAD"])
    def health_check(request: Request):
        """Health check endpoint."""
        usage = resource.getrusage(resource.RUSAGE_SELF)
        return {
            "status": "healthy",
            "timestamp": _now_iso(),
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "memory": {"maxRss": usage.ru_maxrss},
        }

    @app.get("/api/test-db")
    def test_db(request: Request, database: Database = Depends(get_database)):
        """Database connectivity probe."""
        try:
            info = database.server_info()
        except SQLAlchemyError as e:
            error_id = log_error(request, e, "database_unavailable")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"status": "error", "error": "database_unavailable", "errorId": error_id},
            )

        current_time = info["current_time"]
        return {
            "status": "Database connected successfully!",
            "currentTime": current_time.isoformat() if isinstance(current_time, datetime) else str(current_time),
            "postgresVersion": info["version"],
        }

    return app


def run() -> None:
    """Run the API with uvicorn using environment settings."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info(f"Numberwise Dashboard API listening on port {settings.port}")

    uvicorn.run(
        "numberwise.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    run()
