from __future__ import annotations

from typing import Any, Generic, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import Executable, Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Each helper works on the request-scoped session it was given; commits are
    explicit so every mutation is persisted by its own call.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)

    async def delete(self, entity: Any) -> None:
        """Mark a loaded entity for deletion."""
        await self.session.delete(entity)


class EntityRepository(BaseRepository, Generic[ModelT]):
    """
    Repository for one mapped entity type.

    When `tenant_id` is given and the model is tenant-scoped, every query is
    restricted to that tenant.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT], tenant_id: Optional[UUID] = None) -> None:
        super().__init__(session)
        self.model = model
        self.tenant_id = tenant_id if hasattr(model, "tenant_id") else None

    def select(self) -> Select:
        """Base SELECT for the entity, tenant-filtered when applicable."""
        stmt = select(self.model)
        if self.tenant_id is not None:
            stmt = stmt.where(self.model.tenant_id == self.tenant_id)
        return stmt

    async def get_by_id(self, entity_id: UUID) -> Optional[ModelT]:
        stmt = self.select().where(self.model.id == entity_id)
        return await self.scalar_one_or_none(stmt)

    async def fetch_all(self, stmt: Select) -> List[ModelT]:
        res = await self.scalars(stmt)
        return list(res)
