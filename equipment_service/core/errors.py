"""Error taxonomy shared by the repository, the migration manager and the API."""

from __future__ import annotations

from typing import Sequence


class EquipmentServiceError(Exception):
    """Base class for every failure the core reports to its callers."""

    retryable = False

    def __init__(self, message: str, details: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = list(details or [])


class NotFound(EquipmentServiceError):
    """No record exists with the requested id."""


class Conflict(EquipmentServiceError):
    """A uniqueness constraint (tag number) rejected the write."""


class InvalidArgument(EquipmentServiceError):
    """Input is missing, blank, too long or otherwise malformed."""


class MigrationError(EquipmentServiceError):
    """The schema could not be brought to the requested revision."""


class StoreUnavailable(EquipmentServiceError):
    """The store could not be reached or timed out; the caller may retry."""

    retryable = True


class ServiceNotReady(EquipmentServiceError):
    """Requests arrived before the schema was applied successfully."""


__all__ = [
    "EquipmentServiceError",
    "NotFound",
    "Conflict",
    "InvalidArgument",
    "MigrationError",
    "StoreUnavailable",
    "ServiceNotReady",
]
