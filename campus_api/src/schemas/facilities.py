from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from .common import AuditedRead, EntityWrite


class ArchiveLocationWrite(EntityWrite):
    """Archive location payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    building: Optional[str] = Field(None)
    room: Optional[str] = Field(None)
    shelf_code: Optional[str] = Field(None)


class ArchiveLocationUpdate(ArchiveLocationWrite):
    id: UUID = Field(..., description="Must match the path id")


class ArchiveLocationRead(AuditedRead, ArchiveLocationWrite):
    """Archive location read model."""


class ExamRoomWrite(EntityWrite):
    """Exam room payload."""
    name: Optional[str] = Field(None)
    building: Optional[str] = Field(None)
    capacity: Optional[int] = Field(None, description="Seats available for candidates")
    is_available: Optional[bool] = Field(None)


class ExamRoomUpdate(ExamRoomWrite):
    id: UUID = Field(..., description="Must match the path id")


class ExamRoomRead(AuditedRead, ExamRoomWrite):
    """Exam room read model."""


class ResourceWrite(EntityWrite):
    """Resource payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    resource_type: Optional[str] = Field(None)
    quantity: Optional[int] = Field(None)
    archive_location_id: Optional[UUID] = Field(None)


class ResourceUpdate(ResourceWrite):
    id: UUID = Field(..., description="Must match the path id")


class ResourceRead(AuditedRead, ResourceWrite):
    """Resource read model."""


class ResourceBookingWrite(EntityWrite):
    """Resource booking payload."""
    resource_id: Optional[UUID] = Field(None)
    booked_by: Optional[UUID] = Field(None)
    start_time: Optional[datetime] = Field(None)
    end_time: Optional[datetime] = Field(None)
    purpose: Optional[str] = Field(None)
    status: Optional[str] = Field(None)


class ResourceBookingUpdate(ResourceBookingWrite):
    id: UUID = Field(..., description="Must match the path id")


class ResourceBookingRead(AuditedRead, ResourceBookingWrite):
    """Resource booking read model."""


class ResourceRequestWrite(EntityWrite):
    """Resource request payload."""
    resource_id: Optional[UUID] = Field(None)
    requested_by: Optional[UUID] = Field(None)
    quantity: Optional[int] = Field(None)
    reason: Optional[str] = Field(None)
    status: Optional[str] = Field(None)
    requested_on: Optional[datetime] = Field(None)


class ResourceRequestUpdate(ResourceRequestWrite):
    id: UUID = Field(..., description="Must match the path id")


class ResourceRequestRead(AuditedRead, ResourceRequestWrite):
    """Resource request read model."""
