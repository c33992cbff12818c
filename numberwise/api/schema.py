"""
Database Schema Module

Defines the dashboard tables and creates them if they are absent.
"""

import logging
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Uuid,
    func,
    text,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

ROLES = ("admin", "staff", "client")
ACCOUNTING_SYSTEMS = ("exact_online", "snelstart")

metadata = MetaData()


def _id_column() -> Column:
    return Column("id", Uuid, primary_key=True, default=uuid.uuid4)


def _created_at_column() -> Column:
    return Column("created_at", DateTime, server_default=func.current_timestamp())


def _counter(name: str) -> Column:
    return Column(name, Integer, server_default=text("0"))


companies = Table(
    "companies",
    metadata,
    _id_column(),
    Column("name", String(255), nullable=False),
    Column("domain", String(255), unique=True),
    _created_at_column(),
)

users = Table(
    "users",
    metadata,
    _id_column(),
    Column("company_id", Uuid, ForeignKey("companies.id", ondelete="CASCADE")),
    Column("email", String(255), unique=True, nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("role", String(50), nullable=False),
    Column("is_active", Boolean, server_default=text("true")),
    _created_at_column(),
    CheckConstraint(f"role IN {ROLES}", name="users_role_check"),
)

clients = Table(
    "clients",
    metadata,
    _id_column(),
    Column("company_id", Uuid, ForeignKey("companies.id", ondelete="CASCADE")),
    Column("name", String(255), nullable=False),
    Column("contact_email", String(255)),
    Column("accounting_system", String(50)),
    Column("is_active", Boolean, server_default=text("true")),
    _created_at_column(),
    CheckConstraint(
        f"accounting_system IN {ACCOUNTING_SYSTEMS}",
        name="clients_accounting_system_check",
    ),
)

zenvoices_status = Table(
    "zenvoices_status",
    metadata,
    Column(
        "client_id",
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    _counter("pending"),
    _counter("processing"),
    _counter("ready"),
    _counter("failed"),
    Column("last_updated", DateTime, server_default=func.current_timestamp()),
)

accounting_status = Table(
    "accounting_status",
    metadata,
    Column(
        "client_id",
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    _counter("pending"),
    _counter("posted"),
    _counter("errors"),
    Column("last_updated", DateTime, server_default=func.current_timestamp()),
)


def create_schema(engine: Engine) -> None:
    """Create every dashboard table that does not exist yet.

    Args:
        engine: SQLAlchemy engine
    """
    metadata.create_all(engine, checkfirst=True)
    logger.info(f"Schema ready ({', '.join(metadata.tables)})")


def insert_ignoring_conflicts(conn: Connection, table: Table, *conflict_columns: str):
    """Build an INSERT that skips rows colliding on the given columns.

    Args:
        conn: Connection whose dialect decides the statement flavour
        table: Target table
        conflict_columns: Columns of the unique constraint to skip on

    Returns:
        Insert statement
    """
    if conn.dialect.name == "postgresql":
        stmt = postgresql.insert(table)
    elif conn.dialect.name == "sqlite":
        stmt = sqlite.insert(table)
    else:
        raise NotImplementedError(f"Unsupported database dialect: {conn.dialect.name}")

    return stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
