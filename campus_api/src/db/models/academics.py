from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import AuditMixin, Base, TenantMixin, UUIDPkMixin


class Term(UUIDPkMixin, TenantMixin, AuditMixin, Base):
    """Academic term (semester, quarter)."""
    __tablename__ = "terms"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)


class Course(UUIDPkMixin, TenantMixin, AuditMixin, Base):
    """Course offered in the catalog."""
    __tablename__ = "courses"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    credits: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    instructor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("instructors.id", ondelete="SET NULL"), nullable=True
    )


class ReportCard(UUIDPkMixin, TenantMixin, AuditMixin, Base):
    """Grade issued to a student for a course in a term."""
    __tablename__ = "report_cards"

    student_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    term_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("terms.id", ondelete="SET NULL"), nullable=True
    )
    course_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="SET NULL"), nullable=True
    )
    grade: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    score: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    issued_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)


class TimetableTemplate(UUIDPkMixin, TenantMixin, AuditMixin, Base):
    """Reusable weekly timetable layout."""
    __tablename__ = "timetable_templates"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Training(UUIDPkMixin, AuditMixin, Base):
    """Staff training session."""
    __tablename__ = "trainings"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class Event(UUIDPkMixin, AuditMixin, Base):
    """Calendar event (open day, exam week, ceremony)."""
    __tablename__ = "events"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
