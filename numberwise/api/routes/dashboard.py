"""
Dashboard API Routes

Provides endpoints for the main dashboard view.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ...db import Database
from ...status import get_client_detail, get_overview
from ..database import get_database

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class ClientStatus(BaseModel):
    """Client row with both pipelines' counters."""

    client_id: UUID
    client_name: str
    contact_email: str | None = None
    accounting_system: str | None = None
    created_at: datetime | None = None
    zenvoices_pending: int = 0
    zenvoices_processing: int = 0
    zenvoices_ready: int = 0
    zenvoices_failed: int = 0
    accounting_pending: int = 0
    accounting_posted: int = 0
    accounting_errors: int = 0
    zenvoices_last_updated: datetime | None = None
    accounting_last_updated: datetime | None = None


class SummaryTotals(BaseModel):
    """Totals shown on the summary cards."""

    model_config = ConfigDict(populate_by_name=True)

    total_pending: int = Field(alias="totalPending")
    total_processing: int = Field(alias="totalProcessing")
    total_ready: int = Field(alias="totalReady")
    total_errors: int = Field(alias="totalErrors")
    total_posted: int = Field(alias="totalPosted")
    total_clients: int = Field(alias="totalClients")


class OverviewResponse(BaseModel):
    """Complete dashboard overview response."""

    model_config = ConfigDict(populate_by_name=True)

    clients: list[ClientStatus]
    summary: SummaryTotals
    last_updated: datetime = Field(alias="lastUpdated")


class ClientDetailRow(BaseModel):
    """Client row with raw (possibly missing) status columns."""

    client_id: UUID
    company_id: UUID | None = None
    client_name: str
    contact_email: str | None = None
    accounting_system: str | None = None
    is_active: bool | None = None
    created_at: datetime | None = None
    zenvoices_pending: int | None = None
    zenvoices_processing: int | None = None
    zenvoices_ready: int | None = None
    zenvoices_failed: int | None = None
    zenvoices_last_updated: datetime | None = None
    accounting_pending: int | None = None
    accounting_posted: int | None = None
    accounting_errors: int | None = None
    accounting_last_updated: datetime | None = None


class ClientDetailResponse(BaseModel):
    """Single client response."""

    model_config = ConfigDict(populate_by_name=True)

    client: ClientDetailRow
    recent_activity: list[dict[str, Any]] = Field(alias="recentActivity")


@router.get("/overview", response_model=OverviewResponse)
def get_dashboard_overview(
    database: Database = Depends(get_database),
) -> OverviewResponse:
    """Get every active client with status counts and the summary totals.

    Returns:
        OverviewResponse
    """
    overview = get_overview(database)

    return OverviewResponse(
        clients=[ClientStatus(**row) for row in overview.clients],
        summary=SummaryTotals(**overview.summary.to_dict()),
        last_updated=overview.last_updated,
    )


@router.get("/client/{client_id}", response_model=ClientDetailResponse)
def get_dashboard_client(
    client_id: str,
    database: Database = Depends(get_database),
) -> ClientDetailResponse:
    """Get a single client with its status rows.

    Args:
        client_id: Client UUID

    Returns:
        ClientDetailResponse

    Raises:
        ClientNotFoundError: Turned into a 404 by the application
    """
    detail = get_client_detail(database, client_id)

    return ClientDetailResponse(
        client=ClientDetailRow(**detail.client),
        recent_activity=detail.recent_activity,
    )
