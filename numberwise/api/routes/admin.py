"""
Admin API Routes

Operator utilities for inspecting and removing duplicate clients.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ...db import Database
from ...status import cleanup_duplicates, find_duplicate_names, get_client_counts
from ..database import get_database

router = APIRouter(prefix="/admin", tags=["admin"])


class DuplicateItem(BaseModel):
    """Client name shared by several rows."""

    name: str
    count: int


class DuplicatesResponse(BaseModel):
    duplicates: list[DuplicateItem]


class ClientCountResponse(BaseModel):
    """Diagnostic client counts."""

    model_config = ConfigDict(populate_by_name=True)

    total_clients: int = Field(alias="totalClients")
    unique_client_names: int = Field(alias="uniqueClientNames")
    duplicates: list[DuplicateItem]


class CleanupResponse(BaseModel):
    """Duplicate cleanup report."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    duplicates_found: int = Field(alias="duplicatesFound")
    records_removed: int = Field(alias="recordsRemoved")
    client_count_before: int = Field(alias="clientCountBefore")
    client_count_after: int = Field(alias="clientCountAfter")


@router.get("/duplicates", response_model=DuplicatesResponse)
def get_duplicates(
    database: Database = Depends(get_database),
) -> DuplicatesResponse:
    """List client names used more than once."""
    duplicates = find_duplicate_names(database)
    return DuplicatesResponse(duplicates=[DuplicateItem(**d.to_dict()) for d in duplicates])


@router.get("/cleanup-duplicates", response_model=CleanupResponse)
def cleanup_duplicate_clients(
    database: Database = Depends(get_database),
) -> CleanupResponse:
    """Delete all but the earliest created client for each name.

    Destructive and not reversible; deleted clients take their status rows
    with them.

    Returns:
        CleanupResponse
    """
    result = cleanup_duplicates(database)
    return CleanupResponse(**result.to_dict())


@router.get("/client-count", response_model=ClientCountResponse)
def get_client_count(
    database: Database = Depends(get_database),
) -> ClientCountResponse:
    """Get total vs distinct-name client counts with the duplicate list.

    Returns:
        ClientCountResponse
    """
    counts = get_client_counts(database)
    return ClientCountResponse(**counts.to_dict())
