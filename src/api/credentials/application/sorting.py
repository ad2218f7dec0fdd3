"""Orderings for key listings on the management dashboard."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable

from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import APIKeySort, SortDirection


def _status_rank(record: APIKeyRecord, now: datetime) -> int:
    # active < expired < inactive
    if not record.is_active:
        return 2
    if record.is_expired(now):
        return 1
    return 0


def _sort_key(sort: APIKeySort, now: datetime) -> Callable[[APIKeyRecord], Any]:
    if sort == APIKeySort.NAME:
        return lambda record: record.key_name.casefold()
    if sort == APIKeySort.PLATFORM:
        return lambda record: record.platform_type.value
    if sort == APIKeySort.CREATED:
        return lambda record: (record.created_at, record.id.value)
    if sort == APIKeySort.EXPIRES:
        # Keys that never expire sort after every dated key
        return lambda record: (
            record.expires_at is None,
            record.expires_at or now,
        )
    return lambda record: _status_rank(record, now)


def sort_records(
    records: Iterable[APIKeyRecord],
    sort: APIKeySort,
    direction: SortDirection,
    now: datetime,
) -> list[APIKeyRecord]:
    """Return the records ordered by one field.

    The sort is stable, so records that compare equal keep their incoming
    order (newest first from the store) in both directions.
    """
    return sorted(
        records,
        key=_sort_key(sort, now),
        reverse=direction == SortDirection.DESC,
    )
