"""
Client Status Module Tests

Tests for the overview aggregation, client detail lookup and the
duplicate-client utilities.
"""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from numberwise.db import Database
from numberwise.api.schema import accounting_status, clients, zenvoices_status
from numberwise.status import (
    ClientNotFoundError,
    StatusSummary,
    cleanup_duplicates,
    find_duplicate_names,
    get_client_counts,
    get_client_detail,
    get_overview,
    summarize,
)


class TestSummarize:
    """Tests for the summary fold."""

    def test_elementwise_sums(self):
        """Test totals follow the pipeline rules."""
        rows = [
            {
                "zenvoices_pending": 2,
                "zenvoices_processing": 0,
                "zenvoices_ready": 5,
                "zenvoices_failed": 1,
                "accounting_pending": 3,
                "accounting_posted": 10,
                "accounting_errors": 0,
            },
            {
                "zenvoices_pending": 0,
                "zenvoices_processing": 0,
                "zenvoices_ready": 0,
                "zenvoices_failed": 0,
                "accounting_pending": 1,
                "accounting_posted": 0,
                "accounting_errors": 2,
            },
        ]

        summary = summarize(rows)

        assert summary.total_pending == 6
        assert summary.total_errors == 3
        assert summary.total_ready == 5
        assert summary.total_processing == 0
        assert summary.total_posted == 10
        assert summary.total_clients == 2

    def test_empty(self):
        """Test no rows gives zero totals."""
        assert summarize([]) == StatusSummary()

    def test_to_dict_keys(self):
        """Test the summary serializes with dashboard keys."""
        data = StatusSummary(total_pending=4, total_errors=1).to_dict()

        assert data["totalPending"] == 4
        assert data["totalErrors"] == 1
        assert set(data) == {
            "totalPending",
            "totalProcessing",
            "totalReady",
            "totalErrors",
            "totalPosted",
            "totalClients",
        }


class TestGetOverview:
    """Tests for get_overview."""

    def test_worked_example(self, database: Database, add_client):
        """Test the overview totals over stored rows."""
        add_client(
            "Alpha BV",
            zenvoices={"pending": 2, "processing": 0, "ready": 5, "failed": 1},
            accounting={"pending": 3, "posted": 10, "errors": 0},
        )
        add_client(
            "Beta BV",
            zenvoices={"pending": 0, "processing": 0, "ready": 0, "failed": 0},
            accounting={"pending": 1, "posted": 0, "errors": 2},
        )

        overview = get_overview(database)

        assert overview.summary.total_pending == 6
        assert overview.summary.total_errors == 3
        assert overview.summary.total_ready == 5
        assert overview.summary.total_processing == 0
        assert len(overview.clients) == 2

    def test_missing_status_counts_as_zero(self, database: Database, add_client):
        """Test clients without status rows report zero counters."""
        client_id = add_client("No Status BV")

        overview = get_overview(database)
        row = overview.clients[0]

        assert row["client_id"] == client_id
        assert row["zenvoices_pending"] == 0
        assert row["accounting_errors"] == 0
        assert row["zenvoices_last_updated"] is None
        assert overview.summary.total_clients == 1

    def test_ordered_by_name(self, database: Database, add_client):
        """Test clients are listed by name ascending."""
        add_client("Tech Solutions Pro")
        add_client("ABC Manufacturing Ltd")
        add_client("Green Energy Partners")

        names = [row["client_name"] for row in get_overview(database).clients]

        assert names == ["ABC Manufacturing Ltd", "Green Energy Partners", "Tech Solutions Pro"]

    def test_inactive_clients_excluded(self, database: Database, add_client):
        """Test inactive clients are neither listed nor counted."""
        add_client("Active BV", zenvoices={"pending": 1})
        add_client("Dormant BV", zenvoices={"pending": 50}, is_active=False)

        overview = get_overview(database)

        assert [row["client_name"] for row in overview.clients] == ["Active BV"]
        assert overview.summary.total_pending == 1

    def test_last_updated(self, database: Database):
        """Test the reported timestamp."""
        now = datetime(2025, 3, 1, 9, 30)

        overview = get_overview(database, now=now)

        assert overview.last_updated == now
        assert overview.clients == []

    def test_last_updated_defaults_to_utc(self, database: Database):
        """Test the default timestamp is timezone-aware UTC."""
        overview = get_overview(database)

        assert overview.last_updated.utcoffset() == timedelta(0)


class TestGetClientDetail:
    """Tests for get_client_detail."""

    def test_found(self, database: Database, add_client):
        """Test a client with both status rows."""
        client_id = add_client(
            "Detail BV",
            zenvoices={"pending": 4, "processing": 1, "ready": 2, "failed": 0},
            accounting={"pending": 2, "posted": 80, "errors": 1},
            accounting_system="snelstart",
        )

        detail = get_client_detail(database, client_id)

        assert detail.client["client_id"] == client_id
        assert detail.client["client_name"] == "Detail BV"
        assert detail.client["accounting_system"] == "snelstart"
        assert detail.client["zenvoices_pending"] == 4
        assert detail.client["accounting_posted"] == 80

    def test_accepts_string_id(self, database: Database, add_client):
        """Test ids given as strings are parsed."""
        client_id = add_client("String Id BV")

        detail = get_client_detail(database, str(client_id))

        assert detail.client["client_id"] == client_id

    def test_missing_status_is_null(self, database: Database, add_client):
        """Test no zero substitution on detail."""
        client_id = add_client("Bare BV")

        detail = get_client_detail(database, client_id)

        assert detail.client["zenvoices_pending"] is None
        assert detail.client["accounting_errors"] is None

    def test_not_found(self, database: Database):
        """Test unknown ids raise ClientNotFoundError."""
        missing = uuid.uuid4()

        with pytest.raises(ClientNotFoundError) as exc_info:
            get_client_detail(database, missing)

        assert exc_info.value.client_id == str(missing)

    def test_malformed_id(self, database: Database):
        """Test malformed ids are treated as not found."""
        with pytest.raises(ClientNotFoundError):
            get_client_detail(database, "not-a-uuid")

    def test_activity_placeholder(self, database: Database, add_client):
        """Test the activity feed is an explicit placeholder."""
        client_id = add_client("Activity BV")

        detail = get_client_detail(database, client_id)

        assert len(detail.recent_activity) == 1
        assert detail.recent_activity[0]["implemented"] is False
        assert detail.recent_activity[0]["client_id"] == str(client_id)


class TestDuplicates:
    """Tests for the duplicate-client utilities."""

    def test_find_duplicate_names(self, database: Database, add_client):
        """Test only names used more than once are reported."""
        add_client("Acme")
        add_client("Acme")
        add_client("Beta BV")
        add_client("Zeta BV")
        add_client("Zeta BV")
        add_client("Zeta BV")

        duplicates = find_duplicate_names(database)

        assert [(d.name, d.count) for d in duplicates] == [("Acme", 2), ("Zeta BV", 3)]

    def test_client_counts(self, database: Database, add_client):
        """Test total vs unique name counts."""
        add_client("Acme")
        add_client("Acme")
        add_client("Beta BV")

        counts = get_client_counts(database)

        assert counts.total_clients == 3
        assert counts.unique_client_names == 2
        assert counts.to_dict() == {
            "totalClients": 3,
            "uniqueClientNames": 2,
            "duplicates": [{"name": "Acme", "count": 2}],
        }

    def test_cleanup_keeps_earliest(self, database: Database, add_client, count_rows):
        """Test three Acme rows collapse to the earliest created one."""
        middle = add_client("Acme", created_at=datetime(2025, 1, 2), zenvoices={"pending": 2})
        earliest = add_client("Acme", created_at=datetime(2025, 1, 1), zenvoices={"pending": 1})
        latest = add_client("Acme", created_at=datetime(2025, 1, 3), accounting={"posted": 3})
        other = add_client("Beta BV", created_at=datetime(2025, 1, 5))

        result = cleanup_duplicates(database)

        assert result.duplicates_found == 1
        assert result.records_removed == 2
        assert result.client_count_before == 4
        assert result.client_count_after == 2
        assert result.client_count_after == result.client_count_before - result.records_removed

        with database.connect() as conn:
            remaining = set(conn.execute(select(clients.c.id)).scalars())
            zen_ids = set(conn.execute(select(zenvoices_status.c.client_id)).scalars())

        assert remaining == {earliest, other}
        assert middle not in remaining and latest not in remaining
        assert zen_ids == {earliest}
        assert count_rows(accounting_status) == 0

    def test_cleanup_without_duplicates(self, database: Database, add_client):
        """Test cleanup is a no-op when names are unique."""
        add_client("Acme")
        add_client("Beta BV")

        result = cleanup_duplicates(database)

        assert result.to_dict() == {
            "status": "success",
            "duplicatesFound": 0,
            "recordsRemoved": 0,
            "clientCountBefore": 2,
            "clientCountAfter": 2,
        }
