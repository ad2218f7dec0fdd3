"""Unit tests for key listing orderings."""

from datetime import UTC, datetime, timedelta

import pytest

from credentials.application.sorting import sort_records
from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import APIKeySort, PlatformType, SortDirection

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _record(
    name, platform=PlatformType.TWITTER, expires_at=None, is_active=True, created_at=NOW
) -> APIKeyRecord:
    record = APIKeyRecord.create(platform, name, "c", expires_at=expires_at)
    record.is_active = is_active
    record.created_at = created_at
    return record


def _names(records) -> list[str]:
    return [record.key_name for record in records]


class TestSortRecords:
    """Tests for sort_records."""

    def test_name_ignores_case(self):
        """Names compare case-insensitively."""
        records = [_record("beta"), _record("Gamma"), _record("alpha")]

        result = sort_records(records, APIKeySort.NAME, SortDirection.ASC, now=NOW)

        assert _names(result) == ["alpha", "beta", "Gamma"]

    def test_platform(self):
        """Platforms sort by their wire value."""
        records = [
            _record("t", PlatformType.TWITTER),
            _record("o", PlatformType.OPENAI),
            _record("l", PlatformType.LINKEDIN),
        ]

        result = sort_records(records, APIKeySort.PLATFORM, SortDirection.ASC, now=NOW)

        assert _names(result) == ["l", "o", "t"]

    def test_created_descending(self):
        """Descending creation order puts the newest first."""
        records = [
            _record("old", created_at=NOW - timedelta(days=2)),
            _record("new", created_at=NOW),
            _record("mid", created_at=NOW - timedelta(days=1)),
        ]

        result = sort_records(records, APIKeySort.CREATED, SortDirection.DESC, now=NOW)

        assert _names(result) == ["new", "mid", "old"]

    @pytest.mark.parametrize(
        ("direction", "expected"),
        [
            (SortDirection.ASC, ["soon", "later", "never"]),
            (SortDirection.DESC, ["never", "later", "soon"]),
        ],
    )
    def test_keys_without_expiration_sort_last(self, direction, expected):
        """Never-expiring keys come after every dated key when ascending."""
        records = [
            _record("never"),
            _record("later", expires_at=NOW + timedelta(days=30)),
            _record("soon", expires_at=NOW + timedelta(days=1)),
        ]

        result = sort_records(records, APIKeySort.EXPIRES, direction, now=NOW)

        assert _names(result) == expected

    def test_status_orders_active_expired_inactive(self):
        """Active keys come first, then expired, then deactivated."""
        records = [
            _record("inactive", is_active=False),
            _record("expired", expires_at=NOW),
            _record("active"),
        ]

        result = sort_records(records, APIKeySort.STATUS, SortDirection.ASC, now=NOW)

        assert _names(result) == ["active", "expired", "inactive"]

    def test_ties_keep_incoming_order(self):
        """Equal keys keep the order they arrived in, in both directions."""
        records = [_record("first"), _record("second"), _record("third")]

        ascending = sort_records(records, APIKeySort.STATUS, SortDirection.ASC, now=NOW)
        descending = sort_records(
            records, APIKeySort.STATUS, SortDirection.DESC, now=NOW
        )

        assert _names(ascending) == ["first", "second", "third"]
        assert _names(descending) == ["first", "second", "third"]
