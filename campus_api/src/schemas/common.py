from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityWrite(BaseModel):
    """Base for writable entity payloads; readable from ORM rows."""
    model_config = ConfigDict(from_attributes=True)


class AuditedRead(EntityWrite):
    """Identifier plus server-managed audit fields."""
    id: UUID = Field(..., description="Unique identifier")
    created_on: Optional[datetime] = Field(None, description="Creation timestamp (UTC)")
    created_by: Optional[UUID] = Field(None, description="Creating principal")
    updated_on: Optional[datetime] = Field(None, description="Last update timestamp (UTC)")
    updated_by: Optional[UUID] = Field(None, description="Last updating principal")


class TenantScopedRead(AuditedRead):
    """Audited read model for tenant-scoped entities."""
    tenant_id: Optional[UUID] = Field(None, description="Owning tenant")


class IdResponse(BaseModel):
    """Identifier of a newly created record."""
    id: UUID = Field(..., description="Server-assigned identifier")


class StatusResponse(BaseModel):
    """Outcome of an update, patch or delete."""
    status: bool = Field(..., description="True when the operation was applied")


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


# PUBLIC_INTERFACE
class FilterCriterion(BaseModel):
    """
    One property/operator/value predicate from the `filters` query parameter.

    Wire format: {"PropertyName": "Name", "Operator": "Equal", "Value": "X"}.
    """
    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(..., alias="PropertyName")
    operator: str = Field(..., alias="Operator")
    value: Optional[str] = Field(None, alias="Value")

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, v):
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


# PUBLIC_INTERFACE
class PatchOperation(BaseModel):
    """A single RFC 6902 JSON Patch operation."""
    model_config = ConfigDict(populate_by_name=True)

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str = Field(..., description="JSON pointer to the target field, e.g. /name")
    value: Any = Field(None, description="Value for add/replace/test")
    from_: Optional[str] = Field(None, alias="from", description="Source pointer for move/copy")

    @field_validator("op", mode="before")
    @classmethod
    def _lower_op(cls, v):
        return v.lower() if isinstance(v, str) else v


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized API error envelope returned by exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    tenant_id: Optional[str] = Field(default=None, description="Tenant ID (if available)")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
