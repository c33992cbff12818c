"""
Pytest configuration and fixtures for the Numberwise dashboard tests.
"""

import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from numberwise.api.config import Settings
from numberwise.db import Database
from numberwise.api.main import create_app
from numberwise.api.schema import (
    accounting_status,
    clients,
    companies,
    create_schema,
    zenvoices_status,
)

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config_dir() -> Path:
    """Return the packaged config directory path."""
    return PROJECT_ROOT / "numberwise" / "config"


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """In-memory SQLite database with the dashboard schema."""
    db = Database.from_url("sqlite://")
    create_schema(db.engine)
    yield db
    db.dispose()


@pytest.fixture
def settings() -> Settings:
    """Settings for tests (no demo seeding)."""
    return Settings(database_url="sqlite://", seed_demo_data=False)


@pytest.fixture
def app(settings: Settings, database: Database):
    """API application bound to the test database."""
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def company_id(database: Database) -> uuid.UUID:
    """Insert the Numberwise company and return its id."""
    cid = uuid.uuid4()
    with database.transaction() as conn:
        conn.execute(companies.insert().values(id=cid, name="Numberwise", domain="numberwise.nl"))
    return cid


@pytest.fixture
def add_client(database: Database, company_id: uuid.UUID) -> Callable[..., uuid.UUID]:
    """Factory inserting a client with optional status rows."""

    def _add(
        name: str,
        created_at: datetime | None = None,
        zenvoices: dict | None = None,
        accounting: dict | None = None,
        is_active: bool = True,
        accounting_system: str = "exact_online",
    ) -> uuid.UUID:
        client_id = uuid.uuid4()
        values = {
            "id": client_id,
            "company_id": company_id,
            "name": name,
            "contact_email": f"finance@{name.lower().replace(' ', '')}.nl",
            "accounting_system": accounting_system,
            "is_active": is_active,
        }
        if created_at is not None:
            values["created_at"] = created_at

        with database.transaction() as conn:
            conn.execute(clients.insert().values(**values))
            if zenvoices is not None:
                conn.execute(zenvoices_status.insert().values(client_id=client_id, **zenvoices))
            if accounting is not None:
                conn.execute(accounting_status.insert().values(client_id=client_id, **accounting))

        return client_id

    return _add


@pytest.fixture
def count_rows(database: Database) -> Callable:
    """Return a function counting rows of a table."""

    def _count(table) -> int:
        with database.connect() as conn:
            return conn.execute(select(func.count()).select_from(table)).scalar()

    return _count


# Environment setup for tests
@pytest.fixture(autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ.setdefault("DB_HOST", "localhost")
    os.environ.setdefault("DB_PORT", "5432")
    os.environ.setdefault("DB_NAME", "numberwise_test")
    os.environ.setdefault("DB_USER", "test")
    os.environ.setdefault("DB_PASSWORD", "test")
    yield
