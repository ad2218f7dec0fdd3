"""create api_keys table

Revision ID: 3c9a1e7f5b20
Revises:
Create Date: 2026-10-19

Creates the api_keys table holding encrypted third-party platform
credentials. Only encryption envelopes are stored, never raw keys.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c9a1e7f5b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create api_keys table with all columns and indexes."""
    op.create_table(
        "api_keys",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("platform_type", sa.String(32), nullable=False),
        sa.Column("key_name", sa.String(255), nullable=False),
        sa.Column("encrypted_key", sa.Text, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "platform_type",
            "key_name",
            name="uq_api_keys_platform_type_key_name",
        ),
    )

    # Composite index for the active-key lookup
    op.create_index(
        "ix_api_keys_platform_type_is_active",
        "api_keys",
        ["platform_type", "is_active"],
    )


def downgrade() -> None:
    """Drop api_keys table."""
    op.drop_index("ix_api_keys_platform_type_is_active", table_name="api_keys")
    op.drop_table("api_keys")
