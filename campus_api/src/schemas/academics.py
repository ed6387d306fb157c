from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from .common import AuditedRead, EntityWrite, TenantScopedRead


class TermWrite(EntityWrite):
    """Academic term payload."""
    name: Optional[str] = Field(None, description="Term name, e.g. Fall 2026")
    description: Optional[str] = Field(None)
    start_date: Optional[date] = Field(None)
    end_date: Optional[date] = Field(None)


class TermUpdate(TermWrite):
    id: UUID = Field(..., description="Must match the path id")


class TermRead(TenantScopedRead, TermWrite):
    """Academic term read model."""


class CourseWrite(EntityWrite):
    """Course payload."""
    name: Optional[str] = Field(None, description="Course title")
    code: Optional[str] = Field(None, description="Catalog code")
    description: Optional[str] = Field(None)
    credits: Optional[int] = Field(None)
    start_date: Optional[date] = Field(None)
    end_date: Optional[date] = Field(None)
    instructor_id: Optional[UUID] = Field(None)


class CourseUpdate(CourseWrite):
    id: UUID = Field(..., description="Must match the path id")


class CourseRead(TenantScopedRead, CourseWrite):
    """Course read model."""


class ReportCardWrite(EntityWrite):
    """Report card payload."""
    student_name: Optional[str] = Field(None)
    term_id: Optional[UUID] = Field(None)
    course_id: Optional[UUID] = Field(None)
    grade: Optional[str] = Field(None, description="Letter grade")
    score: Optional[Decimal] = Field(None, description="Numeric score")
    remarks: Optional[str] = Field(None)
    issued_on: Optional[date] = Field(None)


class ReportCardUpdate(ReportCardWrite):
    id: UUID = Field(..., description="Must match the path id")


class ReportCardRead(TenantScopedRead, ReportCardWrite):
    """Report card read model."""


class TimetableTemplateWrite(EntityWrite):
    """Timetable template payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)


class TimetableTemplateUpdate(TimetableTemplateWrite):
    id: UUID = Field(..., description="Must match the path id")


class TimetableTemplateRead(TenantScopedRead, TimetableTemplateWrite):
    """Timetable template read model."""


class TrainingWrite(EntityWrite):
    """Training payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)


class TrainingUpdate(TrainingWrite):
    id: UUID = Field(..., description="Must match the path id")


class TrainingRead(AuditedRead, TrainingWrite):
    """Training read model."""


class EventWrite(EntityWrite):
    """Calendar event payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    location: Optional[str] = Field(None)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)


class EventUpdate(EventWrite):
    id: UUID = Field(..., description="Must match the path id")


class EventRead(AuditedRead, EventWrite):
    """Calendar event read model."""
