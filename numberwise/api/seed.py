"""
Demo Seed Module

Fills an empty or partially filled store with the Numberwise company, sample
clients and randomized status counters. This is fixture data for demos and
local development, kept apart from schema creation.
"""

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from uuid import UUID

import yaml
from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from .config import DEFAULT_FIXTURE_PATH
from .schema import (
    ACCOUNTING_SYSTEMS,
    accounting_status,
    clients,
    companies,
    insert_ignoring_conflicts,
    zenvoices_status,
)

logger = logging.getLogger(__name__)


@dataclass
class SeedFixture:
    """Demo data description loaded from YAML."""

    company_name: str
    company_domain: str
    clients: list[dict[str, Any]] = field(default_factory=list)
    status_limit: int = 5
    zenvoices_ranges: dict[str, tuple[int, int]] = field(default_factory=dict)
    accounting_ranges: dict[str, tuple[int, int]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SeedFixture":
        """Load a fixture file.

        Args:
            path: YAML file (defaults to the packaged demo_seed.yaml)

        Returns:
            SeedFixture
        """
        path = Path(path or DEFAULT_FIXTURE_PATH)
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        company = data.get("company") or {}
        if not company.get("domain"):
            raise ValueError(f"Seed fixture {path} has no company domain")

        for client in data.get("clients", []):
            system = client.get("accounting_system")
            if system is not None and system not in ACCOUNTING_SYSTEMS:
                raise ValueError(f"Unknown accounting system '{system}' for client {client.get('name')}")

        return cls(
            company_name=company.get("name", company["domain"]),
            company_domain=company["domain"],
            clients=list(data.get("clients", [])),
            status_limit=int(data.get("status_limit", 5)),
            zenvoices_ranges=_ranges(data.get("zenvoices_ranges", {})),
            accounting_ranges=_ranges(data.get("accounting_ranges", {})),
        )


@dataclass
class SeedReport:
    """What a seed run added."""

    company_id: UUID
    company_created: bool = False
    clients_inserted: int = 0
    status_rows_inserted: int = 0

    def to_dict(self) -> dict:
        return {
            "company_id": str(self.company_id),
            "company_created": self.company_created,
            "clients_inserted": self.clients_inserted,
            "status_rows_inserted": self.status_rows_inserted,
        }


def _ranges(raw: dict) -> dict[str, tuple[int, int]]:
    ranges = {}
    for column, bounds in raw.items():
        low, high = int(bounds[0]), int(bounds[1])
        if low < 0 or high < low:
            raise ValueError(f"Invalid counter range for {column}: {bounds}")
        ranges[column] = (low, high)
    return ranges


def _random_counters(ranges: dict[str, tuple[int, int]], rng: random.Random) -> dict[str, int]:
    return {column: rng.randint(low, high) for column, (low, high) in ranges.items()}


def _ensure_company(conn: Connection, fixture: SeedFixture) -> tuple[UUID, bool]:
    stmt = (
        insert_ignoring_conflicts(conn, companies, "domain")
        .values(name=fixture.company_name, domain=fixture.company_domain)
        .returning(companies.c.id)
    )
    company_id = conn.execute(stmt).scalar()
    if company_id is not None:
        return company_id, True

    existing = conn.execute(
        select(companies.c.id).where(companies.c.domain == fixture.company_domain)
    ).scalar_one()
    return existing, False


def _insert_sample_clients(conn: Connection, company_id: UUID, fixture: SeedFixture) -> int:
    existing_names = set(
        conn.execute(
            select(clients.c.name).where(clients.c.company_id == company_id)
        ).scalars()
    )

    rows = [
        {
            "company_id": company_id,
            "name": client["name"],
            "contact_email": client.get("contact_email"),
            "accounting_system": client.get("accounting_system"),
        }
        for client in fixture.clients
        if client["name"] not in existing_names
    ]

    if rows:
        conn.execute(clients.insert(), rows)
    return len(rows)


def _insert_status_rows(conn: Connection, fixture: SeedFixture, rng: random.Random) -> int:
    missing = (
        select(clients.c.id)
        .outerjoin(zenvoices_status, zenvoices_status.c.client_id == clients.c.id)
        .outerjoin(accounting_status, accounting_status.c.client_id == clients.c.id)
        .where(
            (zenvoices_status.c.client_id.is_(None))
            | (accounting_status.c.client_id.is_(None))
        )
        .order_by(clients.c.created_at, clients.c.name)
        .limit(fixture.status_limit)
    )
    client_ids = list(conn.execute(missing).scalars())

    inserted = 0
    for client_id in client_ids:
        result = conn.execute(
            insert_ignoring_conflicts(conn, zenvoices_status, "client_id").values(
                client_id=client_id,
                **_random_counters(fixture.zenvoices_ranges, rng),
            )
        )
        inserted += result.rowcount

        result = conn.execute(
            insert_ignoring_conflicts(conn, accounting_status, "client_id").values(
                client_id=client_id,
                **_random_counters(fixture.accounting_ranges, rng),
            )
        )
        inserted += result.rowcount

    return inserted


def seed_demo_data(
    engine: Engine,
    fixture: SeedFixture | None = None,
    rng: random.Random | None = None,
) -> SeedReport:
    """Insert the demo company, clients and status rows that are missing.

    Every step runs in one transaction, so a failure leaves the store as it
    was. Running it again adds nothing that already exists.

    Args:
        engine: SQLAlchemy engine
        fixture: Demo data (defaults to the packaged fixture)
        rng: Random source for status counters

    Returns:
        SeedReport
    """
    fixture = fixture or SeedFixture.load()
    rng = rng or random.Random()

    with engine.begin() as conn:
        company_id, company_created = _ensure_company(conn, fixture)
        report = SeedReport(company_id=company_id, company_created=company_created)
        report.clients_inserted = _insert_sample_clients(conn, company_id, fixture)
        report.status_rows_inserted = _insert_status_rows(conn, fixture, rng)

    logger.info(
        f"Demo data seeded for {fixture.company_domain}: "
        f"{report.clients_inserted} clients, {report.status_rows_inserted} status rows"
    )
    return report
