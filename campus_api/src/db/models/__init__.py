"""
ORM models for campus domain entities across academics, billing, facilities
and staff.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .staff import (  # noqa: F401
    AccessLevel,
    Breaks,
    ConflictResolution,
    Employee,
    Instructor,
    Minutes,
)
from .academics import (  # noqa: F401
    Course,
    Event,
    ReportCard,
    Term,
    TimetableTemplate,
    Training,
)
from .billing import (  # noqa: F401
    BillingCycle,
    Discount,
    LateFee,
    PaymentMethod,
    PaymentStatus,
    PaymentTerms,
)
from .facilities import (  # noqa: F401
    ArchiveLocation,
    ExamRoom,
    Resource,
    ResourceBooking,
    ResourceRequest,
)
