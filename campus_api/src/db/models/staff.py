from __future__ import annotations

import uuid
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import AuditMixin, Base, TenantMixin, UUIDPkMixin


class AccessLevel(UUIDPkMixin, AuditMixin, Base):
    """Named access tier assigned to employees."""
    __tablename__ = "access_levels"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class Employee(UUIDPkMixin, TenantMixin, AuditMixin, Base):
    """Staff member record."""
    __tablename__ = "employees"

    first_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hire_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    access_level_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("access_levels.id", ondelete="SET NULL"), nullable=True
    )


class Instructor(UUIDPkMixin, AuditMixin, Base):
    """Teaching staff profile, optionally linked to an employee."""
    __tablename__ = "instructors"

    first_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    specialization: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    employee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )


class Breaks(UUIDPkMixin, AuditMixin, Base):
    """Scheduled break within the school day (recess, lunch)."""
    __tablename__ = "breaks"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class ConflictResolution(UUIDPkMixin, AuditMixin, Base):
    """Record of a workplace or scheduling conflict and how it was resolved."""
    __tablename__ = "conflict_resolutions"

    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resolution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # open/resolved/escalated
    resolved_on: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    employee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )


class Minutes(UUIDPkMixin, AuditMixin, Base):
    """Meeting minutes."""
    __tablename__ = "minutes"

    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meeting_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
