from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """
    Base application error.

    Services raise subclasses of this instead of HTTPException so they stay
    independent of the web layer; the global handler in src.api.main turns them
    into the standard ErrorResponse envelope.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequestError(AppError):
    """Client input is invalid (page bounds, filters, sort order, patch document, ids)."""

    status_code = 400
    error_type = "bad_request"


class NotFoundError(AppError):
    """Requested record does not exist."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, entity: str, entity_id: Any = None) -> None:
        if entity_id is not None:
            message = f"{entity} with id {entity_id} not found"
        else:
            message = f"{entity} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ConfigurationError(AppError):
    """Entity registry or field map is inconsistent; raised at startup."""

    error_type = "configuration_error"
