from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from .common import AuditedRead, EntityWrite, TenantScopedRead


class BillingCycleWrite(EntityWrite):
    """Billing cycle payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    start_date: Optional[date] = Field(None)
    end_date: Optional[date] = Field(None)
    due_day: Optional[int] = Field(None, description="Day of month payments fall due")


class BillingCycleUpdate(BillingCycleWrite):
    id: UUID = Field(..., description="Must match the path id")


class BillingCycleRead(TenantScopedRead, BillingCycleWrite):
    """Billing cycle read model."""


class DiscountWrite(EntityWrite):
    """Discount payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    percentage: Optional[Decimal] = Field(None)
    amount: Optional[Decimal] = Field(None)
    valid_from: Optional[date] = Field(None)
    valid_to: Optional[date] = Field(None)


class DiscountUpdate(DiscountWrite):
    id: UUID = Field(..., description="Must match the path id")


class DiscountRead(AuditedRead, DiscountWrite):
    """Discount read model."""


class LateFeeWrite(EntityWrite):
    """Late fee payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    amount: Optional[Decimal] = Field(None)
    grace_period_days: Optional[int] = Field(None)
    billing_cycle_id: Optional[UUID] = Field(None)


class LateFeeUpdate(LateFeeWrite):
    id: UUID = Field(..., description="Must match the path id")


class LateFeeRead(AuditedRead, LateFeeWrite):
    """Late fee read model."""


class PaymentMethodWrite(EntityWrite):
    """Payment method payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    is_active: Optional[bool] = Field(None)


class PaymentMethodUpdate(PaymentMethodWrite):
    id: UUID = Field(..., description="Must match the path id")


class PaymentMethodRead(AuditedRead, PaymentMethodWrite):
    """Payment method read model."""


class PaymentStatusWrite(EntityWrite):
    """Payment status payload."""
    name: Optional[str] = Field(None)
    code: Optional[str] = Field(None, description="Stable machine code, e.g. PAID")
    description: Optional[str] = Field(None)


class PaymentStatusUpdate(PaymentStatusWrite):
    id: UUID = Field(..., description="Must match the path id")


class PaymentStatusRead(AuditedRead, PaymentStatusWrite):
    """Payment status read model."""


class PaymentTermsWrite(EntityWrite):
    """Payment terms payload."""
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    due_days: Optional[int] = Field(None)
    discount_id: Optional[UUID] = Field(None)


class PaymentTermsUpdate(PaymentTermsWrite):
    id: UUID = Field(..., description="Must match the path id")


class PaymentTermsRead(AuditedRead, PaymentTermsWrite):
    """Payment terms read model."""
