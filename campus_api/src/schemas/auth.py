from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class Principal(BaseModel):
    """Authenticated caller resolved from the bearer token."""
    subject: str = Field(..., description="Token 'sub' claim")
    tenant_id: Optional[str] = Field(None, description="Tenant claim, if any")
    roles: List[str] = Field(default_factory=list)
    entitlements: List[str] = Field(
        default_factory=list, description='Entitlement codes such as "Course:Read"'
    )

    @property
    def user_id(self) -> Optional[UUID]:
        """Subject as a UUID when it is one; used for audit columns."""
        try:
            return UUID(self.subject)
        except ValueError:
            return None
