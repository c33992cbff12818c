"""
Client Status Module

Aggregates Zenvoices and accounting pipeline counts per client and provides
the duplicate-client admin utilities.
"""

from .errors import ClientNotFoundError, StatusError
from .overview import (
    ClientDetail,
    Overview,
    StatusSummary,
    get_client_detail,
    get_overview,
    summarize,
)
from .duplicates import (
    CleanupResult,
    ClientCounts,
    DuplicateName,
    cleanup_duplicates,
    find_duplicate_names,
    get_client_counts,
)

__all__ = [
    "StatusError",
    "ClientNotFoundError",
    "ClientDetail",
    "Overview",
    "StatusSummary",
    "get_client_detail",
    "get_overview",
    "summarize",
    "CleanupResult",
    "ClientCounts",
    "DuplicateName",
    "cleanup_duplicates",
    "find_duplicate_names",
    "get_client_counts",
]
