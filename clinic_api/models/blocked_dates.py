"""Blocked dates table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from clinic_api.models.base import metadata

blocked_dates = Table(
    "blocked_dates",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("date", Date, nullable=False),
    # Empty list blocks the whole day
    Column("time_slots", JSON, nullable=False),
    Column("reason", Text, nullable=False),
    # Admin who created the block
    Column("blocked_by", Text, nullable=False),
    Column("blocked_by_name", Text, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("idx_blocked_dates_date", "date"),
    # At most one active block per calendar day
    Index(
        "uq_blocked_dates_active_date",
        "date",
        unique=True,
        postgresql_where=text("is_active"),
        sqlite_where=text("is_active = 1"),
    ),
)
