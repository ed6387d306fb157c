# Annotations below reference per-resource schema classes bound in the factory
# closure, so they must stay evaluated (no postponed annotations in this module).

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.deps import get_tenant_id, require_entitlement
from src.core.errors import BadRequestError, NotFoundError
from src.core.security import Entitlement
from src.core.settings import get_app_settings
from src.db.session import get_async_session
from src.repositories.query import parse_filters, validate_page_bounds
from src.schemas.auth import Principal
from src.schemas.common import IdResponse, PatchOperation, StatusResponse
from src.services.crud import CrudService
from src.services.registry import EntityResource


# PUBLIC_INTERFACE
def build_entity_router(resource: EntityResource) -> APIRouter:
    """
    Build the CRUD router for one registered entity, mounted at /{route}.

    Every endpoint requires the entitlement matching its verb on the resource
    (Create/Read/Update/Delete). Domain errors propagate as AppError and are
    rendered by the global handlers.
    """
    settings = get_app_settings()
    name = resource.name
    write_schema = resource.write_schema
    update_schema = resource.update_schema
    read_schema = resource.read_schema

    router = APIRouter(prefix=f"/{resource.route}", tags=[name])

    def _service(session: AsyncSession, principal: Principal, tenant_id: Optional[UUID]) -> CrudService:
        return CrudService(
            session,
            resource,
            actor_id=principal.user_id,
            tenant_id=tenant_id,
            max_page_size=settings.MAX_PAGE_SIZE,
        )

    # PUBLIC_INTERFACE
    @router.post(
        "",
        response_model=IdResponse,
        summary=f"Create {name}",
        description=f"Create a new {name} and return its server-assigned id.",
        name=f"{resource.route}_create",
    )
    async def create_entity(
        payload: write_schema,
        session: AsyncSession = Depends(get_async_session),
        principal: Principal = Depends(require_entitlement(name, Entitlement.CREATE)),
        tenant_id: Optional[UUID] = Depends(get_tenant_id),
    ) -> IdResponse:
        new_id = await _service(session, principal, tenant_id).create(payload)
        return IdResponse(id=new_id)

    # PUBLIC_INTERFACE
    @router.get(
        "",
        response_model=List[read_schema],
        summary=f"List {name}",
        description=(
            f"List {name} records with optional JSON filters, free-text search, "
            "sorting and 1-based pagination."
        ),
        name=f"{resource.route}_list",
    )
    async def list_entities(
        filters: Optional[str] = Query(
            None,
            description='JSON array of {"PropertyName", "Operator", "Value"} criteria',
        ),
        search_term: Optional[str] = Query(None, alias="searchTerm", description="Free-text search"),
        page_number: int = Query(1, alias="pageNumber", description="1-based page number"),
        page_size: int = Query(
            settings.DEFAULT_PAGE_SIZE, alias="pageSize", description="Records per page"
        ),
        sort_field: Optional[str] = Query(None, alias="sortField", description="Property to sort by"),
        sort_order: Optional[str] = Query("asc", alias="sortOrder", description="asc or desc"),
        session: AsyncSession = Depends(get_async_session),
        principal: Principal = Depends(require_entitlement(name, Entitlement.READ)),
        tenant_id: Optional[UUID] = Depends(get_tenant_id),
    ) -> List[read_schema]:
        # Reject bad bounds and malformed filters before any store access
        validate_page_bounds(page_number, page_size, settings.MAX_PAGE_SIZE)
        criteria = parse_filters(filters)
        rows = await _service(session, principal, tenant_id).get(
            filters=criteria,
            search_term=search_term,
            page_number=page_number,
            page_size=page_size,
            sort_field=sort_field,
            sort_order=sort_order,
        )
        return [read_schema.model_validate(x) for x in rows]

    # PUBLIC_INTERFACE
    @router.get(
        "/{entity_id}",
        response_model=read_schema,
        summary=f"Get {name}",
        description=f"Get a {name} by id.",
        name=f"{resource.route}_get",
    )
    async def get_entity(
        entity_id: UUID = Path(...),
        session: AsyncSession = Depends(get_async_session),
        principal: Principal = Depends(require_entitlement(name, Entitlement.READ)),
        tenant_id: Optional[UUID] = Depends(get_tenant_id),
    ) -> read_schema:
        entity = await _service(session, principal, tenant_id).get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(name, entity_id)
        return read_schema.model_validate(entity)

    # PUBLIC_INTERFACE
    @router.put(
        "/{entity_id}",
        response_model=StatusResponse,
        summary=f"Replace {name}",
        description=f"Replace every writable field of a {name}. The body id must match the path id.",
        name=f"{resource.route}_update",
    )
    async def update_entity(
        payload: update_schema,
        entity_id: UUID = Path(...),
        session: AsyncSession = Depends(get_async_session),
        principal: Principal = Depends(require_entitlement(name, Entitlement.UPDATE)),
        tenant_id: Optional[UUID] = Depends(get_tenant_id),
    ) -> StatusResponse:
        if payload.id != entity_id:
            raise BadRequestError("Mismatched Id")
        await _service(session, principal, tenant_id).update(entity_id, payload)
        return StatusResponse(status=True)

    # PUBLIC_INTERFACE
    @router.patch(
        "/{entity_id}",
        response_model=StatusResponse,
        summary=f"Patch {name}",
        description=f"Apply an RFC 6902 JSON Patch document to a {name}.",
        name=f"{resource.route}_patch",
    )
    async def patch_entity(
        entity_id: UUID = Path(...),
        operations: Optional[List[PatchOperation]] = Body(None),
        session: AsyncSession = Depends(get_async_session),
        principal: Principal = Depends(require_entitlement(name, Entitlement.UPDATE)),
        tenant_id: Optional[UUID] = Depends(get_tenant_id),
    ) -> StatusResponse:
        await _service(session, principal, tenant_id).patch(entity_id, operations)
        return StatusResponse(status=True)

    # PUBLIC_INTERFACE
    @router.delete(
        "/{entity_id}",
        response_model=StatusResponse,
        summary=f"Delete {name}",
        description=f"Delete a {name} by id.",
        name=f"{resource.route}_delete",
    )
    async def delete_entity(
        entity_id: UUID = Path(...),
        session: AsyncSession = Depends(get_async_session),
        principal: Principal = Depends(require_entitlement(name, Entitlement.DELETE)),
        tenant_id: Optional[UUID] = Depends(get_tenant_id),
    ) -> StatusResponse:
        await _service(session, principal, tenant_id).delete(entity_id)
        return StatusResponse(status=True)

    return router
