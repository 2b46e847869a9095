"""Create booking tables - blocked dates, ticker notifications, appointments.

Revision ID: 001
Revises:
Create Date: 2025-09-10 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Enable pgcrypto extension
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # Create blocked_dates table
    op.create_table(
        "blocked_dates",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time_slots", postgresql.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("blocked_by", sa.Text(), nullable=False),
        sa.Column("blocked_by_name", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_blocked_dates_date", "blocked_dates", ["date"])
    op.create_index(
        "uq_blocked_dates_active_date",
        "blocked_dates",
        ["date"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    # Create ticker_notifications table
    op.create_table(
        "ticker_notifications",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.VARCHAR(length=20), nullable=False),
        sa.Column("start_date", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("end_date", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("priority", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("related_blocked_date_id", postgresql.UUID(), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "type IN ('blocked_date', 'emergency')",
            name="ticker_notifications_type_check",
        ),
        sa.ForeignKeyConstraint(
            ["related_blocked_date_id"],
            ["blocked_dates.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_ticker_notifications_related", "ticker_notifications", ["related_blocked_date_id"]
    )
    op.create_index(
        "idx_ticker_notifications_active_priority",
        "ticker_notifications",
        ["is_active", "priority"],
    )

    # Create appointments table
    op.create_table(
        "appointments",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.VARCHAR(length=20), nullable=False),
        sa.Column("service", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.VARCHAR(length=20), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.VARCHAR(length=20), server_default="pending", nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("deleted_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'no-show')",
            name="appointments_status_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_appointments_date", "appointments", ["date"])
    op.create_index("idx_appointments_created_at", "appointments", ["created_at"])
    op.create_index(
        "uq_appointments_live_slot",
        "appointments",
        ["date", "time"],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled' AND deleted_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("uq_appointments_live_slot", table_name="appointments")
    op.drop_index("idx_appointments_created_at", table_name="appointments")
    op.drop_index("idx_appointments_date", table_name="appointments")
    op.drop_table("appointments")

    op.drop_index("idx_ticker_notifications_active_priority", table_name="ticker_notifications")
    op.drop_index("idx_ticker_notifications_related", table_name="ticker_notifications")
    op.drop_table("ticker_notifications")

    op.drop_index("uq_blocked_dates_active_date", table_name="blocked_dates")
    op.drop_index("idx_blocked_dates_date", table_name="blocked_dates")
    op.drop_table("blocked_dates")
