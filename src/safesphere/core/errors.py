"""
Exception hierarchy.

Callers must be able to tell three situations apart:
- the request itself is malformed (`GeoValidationError`, a `ValueError`),
- the storage collaborator could not be searched (`CandidateFetchError`),
- a referenced entity does not exist (`NotFoundError`).

An empty search result is never an error.
"""

from __future__ import annotations


class SafeSphereError(Exception):
    """Base exception for all application errors."""


class GeoValidationError(SafeSphereError, ValueError):
    """Coordinates or radius outside their valid range."""


class CandidateFetchError(SafeSphereError):
    """The storage layer failed while fetching candidates for a proximity query."""


class NotFoundError(SafeSphereError, LookupError):
    """Entity not found."""

    def __init__(self, resource: str, entity_id: int):
        super().__init__(f"{resource} not found: {entity_id}")
        self.resource = resource
        self.entity_id = entity_id
