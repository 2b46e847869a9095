"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from clinic_api.models.base import metadata

# Appointments table
appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Patient contact
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("phone", String(20), nullable=False),
    # Appointment details
    Column("service", Text, nullable=False),
    Column("date", Date, nullable=False),
    Column("time", String(20), nullable=False),
    Column("message", Text, nullable=True),
    # Status management
    Column("status", String(20), nullable=False, server_default="pending"),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    # Soft delete from the dashboard
    Column("deleted_at", DateTime(timezone=True), nullable=True),
    # Constraints
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'no-show')",
        name="appointments_status_check",
    ),
    Index("idx_appointments_date", "date"),
    Index("idx_appointments_created_at", "created_at"),
    # One live booking per slot
    Index(
        "uq_appointments_live_slot",
        "date",
        "time",
        unique=True,
        postgresql_where=text("status <> 'cancelled' AND deleted_at IS NULL"),
        sqlite_where=text("status <> 'cancelled' AND deleted_at IS NULL"),
    ),
)
