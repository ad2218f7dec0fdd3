"""SQLAlchemy ORM model for the api_keys table.

Stores platform API keys as encryption envelopes. The plaintext secret is
never persisted.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class APIKeyRecordModel(Base, TimestampMixin):
    """ORM model for api_keys table.

    Notes:
    - id is VARCHAR(26) for ULID format
    - encrypted_key holds the base64 envelope (salt | iv | tag | ciphertext)
    - key names are unique per platform
    - the metadata column is mapped to ``key_metadata`` because ``metadata``
      is reserved on declarative classes
    - rows are never deleted by the application, deactivation is a flag
    """

    __tablename__ = "api_keys"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    platform_type: Mapped[str] = mapped_column(String(32), nullable=False)
    key_name: Mapped[str] = mapped_column(String(255), nullable=False)
    encrypted_key: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    key_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (
        UniqueConstraint(
            "platform_type",
            "key_name",
            name="uq_api_keys_platform_type_key_name",
        ),
        Index("ix_api_keys_platform_type_is_active", "platform_type", "is_active"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<APIKeyRecordModel(id={self.id}, platform_type={self.platform_type}, "
            f"key_name={self.key_name}, is_active={self.is_active})>"
        )
