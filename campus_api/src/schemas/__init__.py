"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Entity schemas are grouped by domain module (academics, billing, facilities,
staff); each entity has a Write payload, an Update payload carrying the id, and
a Read model. Common wire types (filters, patch operations, envelopes) live in
.common.
"""

from .common import FilterCriterion, MessageResponse, PatchOperation  # noqa: F401
