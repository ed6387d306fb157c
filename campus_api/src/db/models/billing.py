from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import AuditMixin, Base, TenantMixin, UUIDPkMixin


class BillingCycle(UUIDPkMixin, TenantMixin, AuditMixin, Base):
    """Invoicing period for tuition and fees."""
    __tablename__ = "billing_cycles"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    due_day: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # day of month


class Discount(UUIDPkMixin, AuditMixin, Base):
    """Fee discount expressed as a percentage or fixed amount."""
    __tablename__ = "discounts"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    percentage: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)
    valid_from: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    valid_to: Mapped[Optional[date]] = mapped_column(Date, nullable=True)


class LateFee(UUIDPkMixin, AuditMixin, Base):
    """Penalty charged when a payment misses its due date."""
    __tablename__ = "late_fees"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)
    grace_period_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    billing_cycle_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("billing_cycles.id", ondelete="SET NULL"), nullable=True
    )


class PaymentMethod(UUIDPkMixin, AuditMixin, Base):
    """Accepted means of payment (card, transfer, cash)."""
    __tablename__ = "payment_methods"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)


class PaymentStatus(UUIDPkMixin, AuditMixin, Base):
    """Lifecycle state of a payment (pending, paid, refunded)."""
    __tablename__ = "payment_statuses"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class PaymentTerms(UUIDPkMixin, AuditMixin, Base):
    """Payment due terms, optionally tied to an early-payment discount."""
    __tablename__ = "payment_terms"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    discount_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("discounts.id", ondelete="SET NULL"), nullable=True
    )
