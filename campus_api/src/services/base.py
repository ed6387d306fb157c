from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """
    Base class for services. Holds the request-scoped session shared by the
    repositories a service uses.

    Services raise src.core.errors exceptions, never HTTPException; the API
    layer maps them to status codes.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
