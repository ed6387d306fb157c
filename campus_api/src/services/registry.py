"""
Entity registry: one configuration record per exposed entity.

The generic CRUD service and router factory are parameterized entirely by
these records, so adding an entity means adding a model, its schemas and one
EntityResource entry below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple, Type

from src.core.errors import ConfigurationError
from src.db.base import SERVER_MANAGED_COLUMNS, Base
from src.db import models
from src.repositories.query import EntityFields
from src.schemas import academics, billing, facilities, staff
from src.schemas.common import AuditedRead, EntityWrite


@dataclass(frozen=True)
class EntityResource:
    """Configuration for one CRUD resource."""

    # Resource name used for entitlements ("Course") and, lowercased, the route segment
    name: str
    model: Type[Base]
    write_schema: Type[EntityWrite]
    update_schema: Type[EntityWrite]
    read_schema: Type[AuditedRead]
    searchable: Tuple[str, ...] = ()

    fields: EntityFields = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", EntityFields(self.model, self.searchable))

    @property
    def route(self) -> str:
        return self.name.lower()

    @property
    def tenant_scoped(self) -> bool:
        return "tenant_id" in self.fields.fields


RESOURCES: Tuple[EntityResource, ...] = (
    EntityResource(
        "AccessLevel", models.AccessLevel,
        staff.AccessLevelWrite, staff.AccessLevelUpdate, staff.AccessLevelRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "ArchiveLocation", models.ArchiveLocation,
        facilities.ArchiveLocationWrite, facilities.ArchiveLocationUpdate, facilities.ArchiveLocationRead,
        searchable=("name", "description", "building", "room", "shelf_code"),
    ),
    EntityResource(
        "BillingCycle", models.BillingCycle,
        billing.BillingCycleWrite, billing.BillingCycleUpdate, billing.BillingCycleRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "Breaks", models.Breaks,
        staff.BreaksWrite, staff.BreaksUpdate, staff.BreaksRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "ConflictResolution", models.ConflictResolution,
        staff.ConflictResolutionWrite, staff.ConflictResolutionUpdate, staff.ConflictResolutionRead,
        searchable=("title", "description", "resolution", "status"),
    ),
    EntityResource(
        "Course", models.Course,
        academics.CourseWrite, academics.CourseUpdate, academics.CourseRead,
        searchable=("name", "code", "description"),
    ),
    EntityResource(
        "Discount", models.Discount,
        billing.DiscountWrite, billing.DiscountUpdate, billing.DiscountRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "Employee", models.Employee,
        staff.EmployeeWrite, staff.EmployeeUpdate, staff.EmployeeRead,
        searchable=("first_name", "last_name", "email", "job_title"),
    ),
    EntityResource(
        "Event", models.Event,
        academics.EventWrite, academics.EventUpdate, academics.EventRead,
        searchable=("name", "description", "location"),
    ),
    EntityResource(
        "ExamRoom", models.ExamRoom,
        facilities.ExamRoomWrite, facilities.ExamRoomUpdate, facilities.ExamRoomRead,
        searchable=("name", "building"),
    ),
    EntityResource(
        "Instructor", models.Instructor,
        staff.InstructorWrite, staff.InstructorUpdate, staff.InstructorRead,
        searchable=("first_name", "last_name", "email", "specialization"),
    ),
    EntityResource(
        "LateFee", models.LateFee,
        billing.LateFeeWrite, billing.LateFeeUpdate, billing.LateFeeRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "Minutes", models.Minutes,
        staff.MinutesWrite, staff.MinutesUpdate, staff.MinutesRead,
        searchable=("title", "content"),
    ),
    EntityResource(
        "PaymentMethod", models.PaymentMethod,
        billing.PaymentMethodWrite, billing.PaymentMethodUpdate, billing.PaymentMethodRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "PaymentStatus", models.PaymentStatus,
        billing.PaymentStatusWrite, billing.PaymentStatusUpdate, billing.PaymentStatusRead,
        searchable=("name", "code", "description"),
    ),
    EntityResource(
        "PaymentTerms", models.PaymentTerms,
        billing.PaymentTermsWrite, billing.PaymentTermsUpdate, billing.PaymentTermsRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "ReportCard", models.ReportCard,
        academics.ReportCardWrite, academics.ReportCardUpdate, academics.ReportCardRead,
        searchable=("student_name", "grade", "remarks"),
    ),
    EntityResource(
        "Resource", models.Resource,
        facilities.ResourceWrite, facilities.ResourceUpdate, facilities.ResourceRead,
        searchable=("name", "description", "resource_type"),
    ),
    EntityResource(
        "ResourceBooking", models.ResourceBooking,
        facilities.ResourceBookingWrite, facilities.ResourceBookingUpdate, facilities.ResourceBookingRead,
        searchable=("purpose", "status"),
    ),
    EntityResource(
        "ResourceRequest", models.ResourceRequest,
        facilities.ResourceRequestWrite, facilities.ResourceRequestUpdate, facilities.ResourceRequestRead,
        searchable=("reason", "status"),
    ),
    EntityResource(
        "Term", models.Term,
        academics.TermWrite, academics.TermUpdate, academics.TermRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "TimetableTemplate", models.TimetableTemplate,
        academics.TimetableTemplateWrite, academics.TimetableTemplateUpdate, academics.TimetableTemplateRead,
        searchable=("name", "description"),
    ),
    EntityResource(
        "Training", models.Training,
        academics.TrainingWrite, academics.TrainingUpdate, academics.TrainingRead,
        searchable=("name", "description"),
    ),
)


# PUBLIC_INTERFACE
def validate_resources(resources: Iterable[EntityResource] = RESOURCES) -> Dict[str, EntityResource]:
    """
    Check the registry for consistency and index it by route.

    Raises ConfigurationError on duplicate routes, write schemas naming unknown
    or server-managed columns, update schemas without an id, or read schemas
    exposing fields the model lacks.
    """
    by_route: Dict[str, EntityResource] = {}
    for resource in resources:
        if resource.route in by_route:
            raise ConfigurationError(f"Duplicate route '{resource.route}' for {resource.name}")
        by_route[resource.route] = resource

        columns = set(resource.fields.fields)
        writable = set(resource.write_schema.model_fields)
        unknown = writable - columns
        if unknown:
            raise ConfigurationError(
                f"{resource.name} write schema names unknown fields: {sorted(unknown)}"
            )
        managed = writable & SERVER_MANAGED_COLUMNS
        if managed:
            raise ConfigurationError(
                f"{resource.name} write schema exposes server-managed fields: {sorted(managed)}"
            )
        if "id" not in resource.update_schema.model_fields:
            raise ConfigurationError(f"{resource.name} update schema must carry 'id'")
        unreadable = set(resource.read_schema.model_fields) - columns
        if unreadable:
            raise ConfigurationError(
                f"{resource.name} read schema names unknown fields: {sorted(unreadable)}"
            )
    return by_route
