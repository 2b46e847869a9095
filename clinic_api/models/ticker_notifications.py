"""Ticker notification table: public notices shown in the site-wide ticker."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from clinic_api.models.base import metadata

ticker_notifications = Table(
    "ticker_notifications",
    metadata,
    # Blocked-date notices reuse the id of the block they announce
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("message", Text, nullable=False),
    Column("type", String(20), nullable=False),
    # Only emergency notices carry a stored window; blocked-date windows
    # are derived from the block's date
    Column("start_date", DateTime(timezone=True), nullable=True),
    Column("end_date", DateTime(timezone=True), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("priority", Integer, nullable=False, default=1),
    Column(
        "related_blocked_date_id",
        Uuid,
        ForeignKey("blocked_dates.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "type IN ('blocked_date', 'emergency')",
        name="ticker_notifications_type_check",
    ),
    Index("idx_ticker_notifications_related", "related_blocked_date_id"),
    Index("idx_ticker_notifications_active_priority", "is_active", "priority"),
)
