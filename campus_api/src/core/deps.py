from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from src.core.security import Entitlement, decode_token, has_entitlement
from src.schemas.auth import Principal

logger = logging.getLogger(__name__)

# Bearer scheme (used by docs); errors are raised below so they carry 401
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# PUBLIC_INTERFACE
async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    Resolve the caller from the Authorization bearer token.

    Raises:
        HTTPException: 401 when the token is missing, invalid, expired or has no subject.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("Invalid token")

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized("Invalid token")
    tenant = payload.get("tenant_id")
    return Principal(
        subject=str(subject),
        tenant_id=str(tenant) if tenant else None,
        roles=[str(r) for r in payload.get("roles") or []],
        entitlements=[str(e) for e in payload.get("entitlements") or []],
    )


# PUBLIC_INTERFACE
async def get_tenant_id(
    principal: Principal = Depends(get_current_principal),
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-ID"),
) -> Optional[UUID]:
    """
    Resolve the tenant for the request from X-Tenant-ID or the token's tenant_id claim.

    Raises:
        HTTPException: 400 if the header is not a UUID, 401 if it disagrees with the token.
    Returns:
        UUID | None: tenant identifier, None when neither source provides one
    """
    if x_tenant_id:
        try:
            tenant_id = UUID(x_tenant_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="X-Tenant-ID header must be a valid UUID string.",
            )
        if principal.tenant_id and principal.tenant_id.lower() != str(tenant_id):
            logger.warning("Tenant mismatch for subject %s", principal.subject)
            raise _unauthorized("Tenant mismatch")
        return tenant_id

    if principal.tenant_id:
        try:
            return UUID(principal.tenant_id)
        except ValueError:
            raise _unauthorized("Invalid tenant claim")
    return None


# PUBLIC_INTERFACE
def require_entitlement(resource: str, entitlement: Entitlement):
    """
    Create a dependency that requires `<resource>:<entitlement>` (or the admin role).

    The dependency returns the Principal so handlers can stamp audit columns.
    """

    async def _dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_entitlement(principal.roles, principal.entitlements, resource, entitlement):
            logger.warning(
                "Subject %s lacks %s:%s", principal.subject, resource, entitlement.value
            )
            raise _unauthorized("Insufficient entitlement")
        return principal

    return _dep
