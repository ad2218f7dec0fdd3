"""SQLAlchemy declarative base and shared model utilities.

This module provides the declarative base class for all SQLAlchemy ORM models
and common mixins for timestamps and other shared functionality.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    """
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models.

    Free-form dict columns map to JSON and datetimes are always stored
    timezone-aware.
    """

    type_annotation_map: dict[Any, Any] = {
        dict[str, Any]: JSON,
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns.

    Aggregates normally carry their own timestamps; the defaults only
    apply when a row is written without them.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        onupdate=_utc_now,
        nullable=False,
    )
