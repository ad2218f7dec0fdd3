"""Per-platform summaries of stored API keys for the key dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from credentials.domain.aggregates import APIKeyRecord
from credentials.domain.value_objects import PlatformType

DEFAULT_EXPIRING_WITHIN = timedelta(days=7)


@dataclass(frozen=True)
class PlatformKeyMetrics:
    """Key counts for one platform.

    ``active`` counts records that are active and not expired, the ones
    that can serve traffic. ``expired`` counts active records past their
    expiration, and ``expiring_soon`` active records expiring within the
    look-ahead window.
    """

    platform: PlatformType
    total: int = 0
    active: int = 0
    inactive: int = 0
    expired: int = 0
    expiring_soon: int = 0


def summarize_keys(
    records: Iterable[APIKeyRecord],
    now: datetime,
    expiring_within: timedelta = DEFAULT_EXPIRING_WITHIN,
) -> list[PlatformKeyMetrics]:
    """Summarize records per platform, one entry for every known platform."""
    counts: dict[PlatformType, dict[str, int]] = {
        platform: {
            "total": 0,
            "active": 0,
            "inactive": 0,
            "expired": 0,
            "expiring_soon": 0,
        }
        for platform in PlatformType
    }

    horizon = now + expiring_within
    for record in records:
        bucket = counts[record.platform_type]
        bucket["total"] += 1

        if not record.is_active:
            bucket["inactive"] += 1
        elif record.is_expired(now):
            bucket["expired"] += 1
        else:
            bucket["active"] += 1
            if record.is_expired(horizon):
                bucket["expiring_soon"] += 1

    return [
        PlatformKeyMetrics(platform=platform, **values)
        for platform, values in counts.items()
    ]
