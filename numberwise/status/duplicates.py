"""
Duplicate Client Module

Finds clients that share a name and removes all but the oldest of each.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ..db import Database, fetch_all

logger = logging.getLogger(__name__)

DUPLICATE_NAMES_QUERY = text("""
    SELECT name, COUNT(*) AS count
    FROM clients
    GROUP BY name
    HAVING COUNT(*) > 1
    ORDER BY name ASC
""")

CLIENT_COUNTS_QUERY = text("""
    SELECT COUNT(*) AS total_clients, COUNT(DISTINCT name) AS unique_names
    FROM clients
""")

# Keeps the earliest created row per name; id breaks timestamp ties
DELETE_DUPLICATES_QUERY = text("""
    DELETE FROM clients
    WHERE id IN (
        SELECT id FROM (
            SELECT
                id,
                ROW_NUMBER() OVER (PARTITION BY name ORDER BY created_at ASC, id ASC) AS rn
            FROM clients
        ) ranked
        WHERE ranked.rn > 1
    )
""")


@dataclass
class DuplicateName:
    """A client name used by more than one row."""

    name: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass
class ClientCounts:
    """Total vs distinct-name client counts."""

    total_clients: int
    unique_client_names: int
    duplicates: list[DuplicateName] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalClients": self.total_clients,
            "uniqueClientNames": self.unique_client_names,
            "duplicates": [d.to_dict() for d in self.duplicates],
        }


@dataclass
class CleanupResult:
    """Outcome of a duplicate cleanup run."""

    duplicates_found: int
    records_removed: int
    client_count_before: int
    client_count_after: int
    status: str = "success"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "duplicatesFound": self.duplicates_found,
            "recordsRemoved": self.records_removed,
            "clientCountBefore": self.client_count_before,
            "clientCountAfter": self.client_count_after,
        }


def _duplicate_names(conn: Connection) -> list[DuplicateName]:
    return [
        DuplicateName(name=row["name"], count=int(row["count"]))
        for row in fetch_all(conn, DUPLICATE_NAMES_QUERY)
    ]


def _total_clients(conn: Connection) -> int:
    return int(conn.execute(text("SELECT COUNT(*) FROM clients")).scalar())


def find_duplicate_names(database: Database) -> list[DuplicateName]:
    """Group clients by name and return the groups with more than one row.

    Args:
        database: Database to query

    Returns:
        List of DuplicateName ordered by name
    """
    with database.connect() as conn:
        return _duplicate_names(conn)


def get_client_counts(database: Database) -> ClientCounts:
    """Report total and distinct-name client counts with the duplicates.

    Args:
        database: Database to query

    Returns:
        ClientCounts
    """
    with database.connect() as conn:
        counts = fetch_all(conn, CLIENT_COUNTS_QUERY)[0]
        duplicates = _duplicate_names(conn)

    return ClientCounts(
        total_clients=int(counts["total_clients"]),
        unique_client_names=int(counts["unique_names"]),
        duplicates=duplicates,
    )


def cleanup_duplicates(database: Database) -> CleanupResult:
    """Delete every client except the earliest created one per name.

    Runs as a single transaction. Status rows of deleted clients go with
    them through the foreign key cascade. There is no dry run.

    Args:
        database: Database to modify

    Returns:
        CleanupResult
    """
    with database.transaction() as conn:
        count_before = _total_clients(conn)
        duplicates = _duplicate_names(conn)
        conn.execute(DELETE_DUPLICATES_QUERY)
        count_after = _total_clients(conn)

    result = CleanupResult(
        duplicates_found=len(duplicates),
        records_removed=count_before - count_after,
        client_count_before=count_before,
        client_count_after=count_after,
    )

    if result.records_removed:
        logger.warning(
            f"Removed {result.records_removed} duplicate clients "
            f"across {result.duplicates_found} names"
        )
    else:
        logger.info("No duplicate clients to remove")

    return result
