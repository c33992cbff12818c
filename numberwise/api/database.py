"""
Database Connection Module

Builds the PostgreSQL connection pool from the application settings and
hands it to request handlers.
"""

import logging
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine

from ..db import Database
from .config import Settings

logger = logging.getLogger(__name__)


def database_from_settings(settings: Settings) -> Database:
    """Create the pooled engine described by the settings.

    Args:
        settings: Application settings

    Returns:
        Database
    """
    if settings.database_url.startswith("sqlite"):
        return Database.from_url(settings.database_url)

    connect_args: dict[str, Any] = {}
    if settings.require_ssl:
        connect_args["sslmode"] = "require"

    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        connect_args=connect_args,
    )
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return Database(engine)


def get_database(request: Request) -> Database:
    """Get the application's database for FastAPI dependency injection.

    Returns:
        Database stored on the application state
    """
    return request.app.state.database
