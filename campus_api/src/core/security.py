from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from jose import JWTError, jwt

from src.core.settings import get_app_settings

ADMIN_ROLE = "admin"


class Entitlement(str, Enum):
    """Per-resource action a principal can be granted."""
    CREATE = "Create"
    READ = "Read"
    UPDATE = "Update"
    DELETE = "Delete"


# PUBLIC_INTERFACE
def create_access_token(
    subject: str,
    tenant_id: Optional[str] = None,
    roles: Iterable[str] | None = None,
    entitlements: Iterable[str] | None = None,
    expires_minutes: Optional[int] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a signed access token.

    Claims: sub, optional tenant_id, roles, entitlements ("<Resource>:<Entitlement>"),
    plus exp/iat/type.
    """
    settings = get_app_settings()
    now = datetime.now(tz=timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: Dict[str, Any] = {
        "sub": subject,
        "roles": list(roles or []),
        "entitlements": list(entitlements or []),
        "exp": expire,
        "iat": now,
        "type": "access",
    }
    if tenant_id is not None:
        payload["tenant_id"] = str(tenant_id)
    if extra:
        payload.update(extra)
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# PUBLIC_INTERFACE
def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT; raises JWTError if invalid/expired."""
    settings = get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


# PUBLIC_INTERFACE
def get_token_subject(token: str) -> Optional[str]:
    """Return 'sub' from a token or None when token is invalid."""
    try:
        payload = decode_token(token)
        return payload.get("sub")
    except JWTError:
        return None


# PUBLIC_INTERFACE
def has_entitlement(
    roles: Iterable[str], entitlements: Iterable[str], resource: str, entitlement: str | Entitlement
) -> bool:
    """
    Decide whether a principal may perform `entitlement` on `resource`.

    Granted by the admin role, an exact "<Resource>:<Entitlement>" code, or a
    "<Resource>:*" wildcard. Codes compare case-insensitively.
    """
    if ADMIN_ROLE in {r.lower() for r in roles}:
        return True
    if isinstance(entitlement, Entitlement):
        entitlement = entitlement.value
    wanted = {f"{resource}:{entitlement}".lower(), f"{resource}:*".lower()}
    return any(code.lower() in wanted for code in entitlements)
