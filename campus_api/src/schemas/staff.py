from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from pydantic import Field

from .common import AuditedRead, EntityWrite, TenantScopedRead


class AccessLevelWrite(EntityWrite):
    """Access level payload."""
    name: Optional[str] = Field(None, description="Access level name")
    description: Optional[str] = Field(None)
    level: Optional[int] = Field(None, description="Numeric tier; higher grants more")


class AccessLevelUpdate(AccessLevelWrite):
    id: UUID = Field(..., description="Must match the path id")


class AccessLevelRead(AuditedRead, AccessLevelWrite):
    """Access level read model."""


class EmployeeWrite(EntityWrite):
    """Employee payload."""
    first_name: Optional[str] = Field(None)
    last_name: Optional[str] = Field(None)
    email: Optional[str] = Field(None)
    phone: Optional[str] = Field(None)
    job_title: Optional[str] = Field(None)
    hire_date: Optional[date] = Field(None)
    access_level_id: Optional[UUID] = Field(None, description="AccessLevel id")


class EmployeeUpdate(EmployeeWrite):
    id: UUID = Field(..., description="Must match the path id")


class EmployeeRead(TenantScopedRead, EmployeeWrite):
    """Employee read model."""


class InstructorWrite(EntityWrite):
    """Instructor payload."""
    first_name: Optional[str] = Field(None)
    last_name: Optional[str] = Field(None)
    email: Optional[str] = Field(None)
    phone: Optional[str] = Field(None)
    specialization: Optional[str] = Field(None)
    employee_id: Optional[UUID] = Field(None, description="Employee id")


class InstructorUpdate(InstructorWrite):
    id: UUID = Field(..., description="Must match the path id")


class InstructorRead(AuditedRead, InstructorWrite):
    """Instructor read model."""


class BreaksWrite(EntityWrite):
    """Break payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    start_time: Optional[time] = Field(None, description="Start time of day")
    end_time: Optional[time] = Field(None, description="End time of day")
    duration_minutes: Optional[int] = Field(None)


class BreaksUpdate(BreaksWrite):
    id: UUID = Field(..., description="Must match the path id")


class BreaksRead(AuditedRead, BreaksWrite):
    """Break read model."""


class ConflictResolutionWrite(EntityWrite):
    """Conflict resolution payload."""
    title: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    resolution: Optional[str] = Field(None)
    status: Optional[str] = Field(None, description="open/resolved/escalated")
    resolved_on: Optional[datetime] = Field(None)
    employee_id: Optional[UUID] = Field(None)


class ConflictResolutionUpdate(ConflictResolutionWrite):
    id: UUID = Field(..., description="Must match the path id")


class ConflictResolutionRead(AuditedRead, ConflictResolutionWrite):
    """Conflict resolution read model."""


class MinutesWrite(EntityWrite):
    """Meeting minutes payload."""
    title: Optional[str] = Field(None)
    meeting_date: Optional[datetime] = Field(None)
    content: Optional[str] = Field(None)
    recorded_by: Optional[UUID] = Field(None, description="Employee id of the minute taker")


class MinutesUpdate(MinutesWrite):
    id: UUID = Field(..., description="Must match the path id")


class MinutesRead(AuditedRead, MinutesWrite):
    """Meeting minutes read model."""
