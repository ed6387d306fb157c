from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import AuditMixin, Base, UUIDPkMixin


class ArchiveLocation(UUIDPkMixin, AuditMixin, Base):
    """Physical place where records or equipment are archived."""
    __tablename__ = "archive_locations"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    building: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    room: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shelf_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ExamRoom(UUIDPkMixin, AuditMixin, Base):
    """Room that can host examinations."""
    __tablename__ = "exam_rooms"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    building: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_available: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)


class Resource(UUIDPkMixin, AuditMixin, Base):
    """Bookable or requestable resource (projector, lab kit, vehicle)."""
    __tablename__ = "resources"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resource_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    archive_location_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("archive_locations.id", ondelete="SET NULL"), nullable=True
    )


class ResourceBooking(UUIDPkMixin, AuditMixin, Base):
    """Time-boxed reservation of a resource."""
    __tablename__ = "resource_bookings"

    resource_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("resources.id", ondelete="SET NULL"), nullable=True
    )
    booked_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    purpose: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ResourceRequest(UUIDPkMixin, AuditMixin, Base):
    """Request for a quantity of a resource."""
    __tablename__ = "resource_requests"

    resource_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("resources.id", ondelete="SET NULL"), nullable=True
    )
    requested_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    requested_on: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
