"""
Core application utilities for settings, errors, logging and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Application exceptions mapped to HTTP statuses by the API layer
- Token helpers and dependency helpers (principal, tenant, entitlement checks)
"""
