from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import UUID, uuid4

import jsonpatch
import jsonpointer
from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import BadRequestError, NotFoundError
from src.repositories.base import EntityRepository
from src.repositories.query import (
    apply_filter,
    apply_sort,
    page_offset,
    paginate,
    validate_page_bounds,
)
from src.schemas.common import FilterCriterion, PatchOperation
from src.services.base import BaseService
from src.services.registry import EntityResource

logger = logging.getLogger(__name__)

PatchDocument = Sequence[Union[PatchOperation, Dict[str, Any]]]


class CrudService(BaseService):
    """
    Create/read/update/patch/delete for any registered entity.

    Every mutation commits immediately. Records that are absent raise
    NotFoundError on update, patch and delete; get_by_id returns None.
    """

    def __init__(
        self,
        session: AsyncSession,
        resource: EntityResource,
        actor_id: Optional[UUID] = None,
        tenant_id: Optional[UUID] = None,
        max_page_size: Optional[int] = None,
    ) -> None:
        super().__init__(session)
        self.resource = resource
        self.actor_id = actor_id
        self.tenant_id = tenant_id if resource.tenant_scoped else None
        self.max_page_size = max_page_size
        self.repo = EntityRepository(session, resource.model, tenant_id=self.tenant_id)

    # PUBLIC_INTERFACE
    async def get_by_id(self, entity_id: UUID):
        """Return the entity or None when it does not exist."""
        return await self.repo.get_by_id(entity_id)

    # PUBLIC_INTERFACE
    async def get(
        self,
        filters: Optional[Sequence[FilterCriterion]] = None,
        search_term: Optional[str] = "",
        page_number: int = 1,
        page_size: int = 1,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = "asc",
    ) -> List[Any]:
        """
        Return one page of entities: filter, then sort, then paginate.

        Raises:
            BadRequestError: invalid page bounds, unknown property, unsupported
            operator, unparseable value, or sort order other than asc/desc.
        """
        validate_page_bounds(page_number, page_size, self.max_page_size)
        fields = self.resource.fields
        stmt = apply_filter(self.repo.select(), fields, filters, search_term)
        stmt = apply_sort(stmt, fields, sort_field, sort_order)
        if page_offset(page_number, page_size) is None:
            return []
        stmt = paginate(stmt, page_number, page_size, self.max_page_size)
        return await self.repo.fetch_all(stmt)

    # PUBLIC_INTERFACE
    async def create(self, payload: Union[BaseModel, Dict[str, Any]]) -> UUID:
        """Persist a new record and return its server-assigned id."""
        values = self._writable_values(payload)
        entity = self.resource.model(**values)
        entity.id = uuid4()
        entity.created_on = _utcnow()
        entity.created_by = self.actor_id
        if self.tenant_id is not None:
            entity.tenant_id = self.tenant_id

        await self.repo.add(entity)
        await self.repo.commit()
        logger.info("Created %s %s", self.resource.name, entity.id)
        return entity.id

    # PUBLIC_INTERFACE
    async def update(self, entity_id: UUID, payload: Union[BaseModel, Dict[str, Any]]) -> bool:
        """Replace every writable field of an existing record."""
        entity = await self._require(entity_id)
        for key, value in self._writable_values(payload).items():
            setattr(entity, key, value)
        self._touch(entity)
        await self.repo.commit()
        logger.info("Updated %s %s", self.resource.name, entity_id)
        return True

    # PUBLIC_INTERFACE
    async def patch(self, entity_id: UUID, operations: Optional[PatchDocument]) -> bool:
        """
        Apply an RFC 6902 JSON Patch document to an existing record.

        Only writable fields can be targeted; the patched document is validated
        with the entity's write schema before anything is assigned.
        """
        if operations is None:
            raise BadRequestError("Patch document is missing.")
        entity = await self._require(entity_id)

        write_schema = self.resource.write_schema
        document = write_schema.model_validate(entity).model_dump(mode="json")
        ops = [self._normalize_operation(op) for op in operations]
        try:
            patched = self._apply_operations(document, ops)
        except jsonpatch.JsonPatchTestFailed as exc:
            raise BadRequestError(f"Patch test failed: {exc}") from exc
        except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as exc:
            raise BadRequestError(f"Invalid patch document: {exc}") from exc

        if not isinstance(patched, dict):
            raise BadRequestError("Patch must leave the document an object.")
        unknown = set(patched) - set(document)
        if unknown:
            raise BadRequestError(
                "Patch targets unknown or read-only fields.", details=sorted(unknown)
            )
        try:
            validated = write_schema.model_validate(patched)
        except ValidationError as exc:
            raise BadRequestError(
                "Patched entity is invalid.",
                details=exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

        changed = [key for key in document if patched.get(key) != document[key]]
        for key in changed:
            setattr(entity, key, getattr(validated, key))
        self._touch(entity)
        await self.repo.commit()
        logger.info("Patched %s %s fields=%s", self.resource.name, entity_id, changed)
        return True

    # PUBLIC_INTERFACE
    async def delete(self, entity_id: UUID) -> bool:
        """Remove an existing record."""
        entity = await self._require(entity_id)
        await self.repo.delete(entity)
        await self.repo.commit()
        logger.info("Deleted %s %s", self.resource.name, entity_id)
        return True

    async def _require(self, entity_id: UUID):
        entity = await self.repo.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.resource.name, entity_id)
        return entity

    def _writable_values(self, payload: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        write_schema = self.resource.write_schema
        if not isinstance(payload, write_schema):
            data = payload.model_dump() if isinstance(payload, BaseModel) else payload
            try:
                payload = write_schema.model_validate(data)
            except ValidationError as exc:
                raise BadRequestError(
                    f"Invalid {self.resource.name} payload.",
                    details=exc.errors(include_url=False, include_context=False, include_input=False),
                ) from exc
        return payload.model_dump(include=set(write_schema.model_fields))

    def _apply_operations(self, document: Dict[str, Any], ops: List[Dict[str, Any]]) -> Any:
        # Applied one at a time so a "test" sees the document as patched so far.
        for op in ops:
            if op.get("op") == "test" and self._typed_test(document, op):
                continue
            document = jsonpatch.JsonPatch([op]).apply(document)
        return document

    def _typed_test(self, document: Any, op: Dict[str, Any]) -> bool:
        """
        Run a "test" on a top-level field by comparing values of the field's type,
        so 85.5 matches a stored Decimal and any ISO form matches a stored datetime.

        Returns False for paths this cannot handle; jsonpatch then runs the test.
        """
        path = op.get("path")
        if not isinstance(document, dict) or not isinstance(path, str) or "value" not in op:
            return False
        key = path[1:] if path.startswith("/") else None
        field = self.resource.write_schema.model_fields.get(key) if key else None
        if field is None or key not in document:
            return False

        adapter = _type_adapter(field.annotation)
        try:
            expected = adapter.validate_python(op["value"])
        except ValidationError as exc:
            raise jsonpatch.JsonPatchTestFailed(
                f"{op['value']!r} is not a valid value for '{key}'"
            ) from exc
        actual = adapter.validate_python(document[key])
        if _as_utc(actual) != _as_utc(expected):
            raise jsonpatch.JsonPatchTestFailed(
                f"'{key}' is {document[key]!r}, not {op['value']!r}"
            )
        return True

    def _touch(self, entity) -> None:
        entity.updated_on = _utcnow()
        entity.updated_by = self.actor_id

    def _normalize_operation(self, operation: Union[PatchOperation, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(operation, PatchOperation):
            data = operation.model_dump(by_alias=True, exclude_unset=True)
        else:
            data = dict(operation)
        for key in ("path", "from"):
            if isinstance(data.get(key), str):
                data[key] = self._normalize_pointer(data[key])
        return data

    def _normalize_pointer(self, pointer: str) -> str:
        # "/StartDate" -> "/start_date"; deeper segments are left as-is
        if not pointer.startswith("/"):
            return pointer
        head, sep, rest = pointer[1:].partition("/")
        canonical = self.resource.fields.canonical_name(head)
        if canonical is None:
            return pointer
        return f"/{canonical}{sep}{rest}"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _as_utc(value: Any) -> Any:
    # Stored timestamps are UTC; some drivers hand them back naive.
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@lru_cache(maxsize=None)
def _type_adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)
