"""
Status Overview Module

Joins clients with their Zenvoices and accounting status rows and folds the
per-client counts into dashboard totals.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping
from uuid import UUID

from sqlalchemy import DateTime, Uuid, bindparam, text

from ..db import Database
from .errors import ClientNotFoundError

logger = logging.getLogger(__name__)

OVERVIEW_QUERY = text("""
    SELECT
        c.id AS client_id,
        c.name AS client_name,
        c.contact_email,
        c.accounting_system,
        c.created_at,
        COALESCE(z.pending, 0) AS zenvoices_pending,
        COALESCE(z.processing, 0) AS zenvoices_processing,
        COALESCE(z.ready, 0) AS zenvoices_ready,
        COALESCE(z.failed, 0) AS zenvoices_failed,
        COALESCE(a.pending, 0) AS accounting_pending,
        COALESCE(a.posted, 0) AS accounting_posted,
        COALESCE(a.errors, 0) AS accounting_errors,
        z.last_updated AS zenvoices_last_updated,
        a.last_updated AS accounting_last_updated
    FROM clients c
    LEFT JOIN zenvoices_status z ON z.client_id = c.id
    LEFT JOIN accounting_status a ON a.client_id = c.id
    WHERE c.is_active = TRUE
    ORDER BY c.name ASC
""").columns(
    client_id=Uuid,
    created_at=DateTime,
    zenvoices_last_updated=DateTime,
    accounting_last_updated=DateTime,
)

# No COALESCE here: a client without status rows reports nulls
CLIENT_DETAIL_QUERY = text("""
    SELECT
        c.id AS client_id,
        c.company_id,
        c.name AS client_name,
        c.contact_email,
        c.accounting_system,
        c.is_active,
        c.created_at,
        z.pending AS zenvoices_pending,
        z.processing AS zenvoices_processing,
        z.ready AS zenvoices_ready,
        z.failed AS zenvoices_failed,
        z.last_updated AS zenvoices_last_updated,
        a.pending AS accounting_pending,
        a.posted AS accounting_posted,
        a.errors AS accounting_errors,
        a.last_updated AS accounting_last_updated
    FROM clients c
    LEFT JOIN zenvoices_status z ON z.client_id = c.id
    LEFT JOIN accounting_status a ON a.client_id = c.id
    WHERE c.id = :client_id
""").bindparams(
    bindparam("client_id", type_=Uuid),
).columns(
    client_id=Uuid,
    company_id=Uuid,
    created_at=DateTime,
    zenvoices_last_updated=DateTime,
    accounting_last_updated=DateTime,
)


@dataclass
class StatusSummary:
    """Dashboard totals across all listed clients."""

    total_pending: int = 0
    total_processing: int = 0
    total_ready: int = 0
    total_errors: int = 0
    total_posted: int = 0
    total_clients: int = 0

    def to_dict(self) -> dict:
        return {
            "totalPending": self.total_pending,
            "totalProcessing": self.total_processing,
            "totalReady": self.total_ready,
            "totalErrors": self.total_errors,
            "totalPosted": self.total_posted,
            "totalClients": self.total_clients,
        }


@dataclass
class Overview:
    """Client list with status counts and totals."""

    clients: list[dict[str, Any]] = field(default_factory=list)
    summary: StatusSummary = field(default_factory=StatusSummary)
    last_updated: datetime | None = None


@dataclass
class ClientDetail:
    """Single client row with its raw status columns."""

    client: dict[str, Any]
    recent_activity: list[dict[str, Any]] = field(default_factory=list)


def summarize(rows: Iterable[Mapping[str, Any]]) -> StatusSummary:
    """Fold per-client counters into dashboard totals.

    Pending counts both pipelines, errors counts Zenvoices failures plus
    accounting errors; ready and processing are Zenvoices only.

    Args:
        rows: Overview rows

    Returns:
        StatusSummary
    """
    summary = StatusSummary()

    for row in rows:
        summary.total_pending += (row.get("zenvoices_pending") or 0) + (row.get("accounting_pending") or 0)
        summary.total_errors += (row.get("zenvoices_failed") or 0) + (row.get("accounting_errors") or 0)
        summary.total_ready += row.get("zenvoices_ready") or 0
        summary.total_processing += row.get("zenvoices_processing") or 0
        summary.total_posted += row.get("accounting_posted") or 0
        summary.total_clients += 1

    return summary


def get_overview(database: Database, now: datetime | None = None) -> Overview:
    """List active clients with status counts and compute the totals.

    Args:
        database: Database to query
        now: Timestamp to report as last updated (defaults to now)

    Returns:
        Overview
    """
    rows = database.execute_query(OVERVIEW_QUERY)

    return Overview(
        clients=rows,
        summary=summarize(rows),
        last_updated=now or datetime.now(timezone.utc),
    )


def placeholder_activity(client_id: UUID) -> list[dict[str, Any]]:
    """Activity feed stand-in until an event source exists."""
    return [
        {
            "type": "placeholder",
            "client_id": str(client_id),
            "message": "Activity tracking is not implemented yet",
            "implemented": False,
        }
    ]


def get_client_detail(database: Database, client_id: UUID | str) -> ClientDetail:
    """Fetch one client with its status rows.

    Args:
        database: Database to query
        client_id: Client UUID (a malformed id counts as not found)

    Returns:
        ClientDetail

    Raises:
        ClientNotFoundError: If no client has this id
    """
    if not isinstance(client_id, UUID):
        try:
            client_id = UUID(str(client_id))
        except ValueError:
            raise ClientNotFoundError(str(client_id)) from None

    rows = database.execute_query(CLIENT_DETAIL_QUERY, {"client_id": client_id})
    if not rows:
        raise ClientNotFoundError(str(client_id))

    return ClientDetail(client=rows[0], recent_activity=placeholder_activity(client_id))
