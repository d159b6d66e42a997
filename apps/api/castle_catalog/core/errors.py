"""
Error taxonomy shared by the REST and GraphQL layers.

Stores never raise for a missing record; they return None/False.
Service and relation functions turn absence into NotFoundError where a
result is required, and reject bad input with ValidationFailed before any
store mutation happens.
"""
from __future__ import annotations

from typing import Any, Optional


class CatalogError(Exception):
    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(CatalogError):
    kind = "not_found"
    status_code = 404


class ValidationFailed(CatalogError):
    kind = "validation_error"
    status_code = 400


class RelationWarning(RuntimeWarning):
    """A best-effort join step failed; the primary record is still returned."""
