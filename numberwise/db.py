"""
Database Module

Wraps a SQLAlchemy engine as an owned resource and runs raw parameterized
SQL, returning rows as dictionaries.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.expression import Executable

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the SQLAlchemy engine (and its pool) for one application."""

    def __init__(self, engine: Engine):
        """Wrap an existing engine.

        Args:
            engine: SQLAlchemy engine
        """
        self.engine = engine

        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_url(cls, url: str) -> "Database":
        """Create an unpooled engine for a URL (used for SQLite and tests).

        In-memory SQLite shares one connection so every checkout sees the
        same data.
        """
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(url)
        return cls(engine)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def connect(self) -> Generator[Connection, None, None]:
        """Check out a pooled connection without a transaction block."""
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """Check out a connection inside a transaction.

        Commits on success, rolls back if the block raises.
        """
        with self.engine.begin() as conn:
            yield conn

    def execute_query(
        self,
        query: str | Executable,
        params: dict | None = None,
    ) -> list[dict]:
        """Execute raw SQL query and return results as dictionaries.

        Args:
            query: SQL query string or prepared statement
            params: Query parameters

        Returns:
            List of result dictionaries
        """
        with self.transaction() as conn:
            return fetch_all(conn, query, params)

    def server_info(self) -> dict:
        """Current database time and server version."""
        with self.connect() as conn:
            current_time = conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
            if self.dialect == "sqlite":
                version = "SQLite " + conn.execute(text("SELECT sqlite_version()")).scalar()
            else:
                version = conn.execute(text("SELECT version()")).scalar()

        return {"current_time": current_time, "version": version}

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database engine disposed")


def fetch_all(
    conn: Connection,
    query: str | Executable,
    params: dict | None = None,
) -> list[dict]:
    """Run a query on an open connection.

    Returns:
        List of row dictionaries for SELECT/RETURNING, empty list otherwise
    """
    if isinstance(query, str):
        query = text(query)

    result = conn.execute(query, params or {})

    if result.returns_rows:
        return [dict(row) for row in result.mappings().all()]

    return []
