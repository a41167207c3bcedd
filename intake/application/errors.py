from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class AppError(RuntimeError):
    """Base application-level error."""


class PatientValidationError(AppError):
    """Input validation failure carrying every violated rule, in order."""

    def __init__(self, violations: Iterable[str]) -> None:
        self.violations: list[str] = list(violations)
        super().__init__("\n".join(self.violations))


class StorageOperation(StrEnum):
    LOAD = "load"
    SEARCH = "search"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOAD_STATIONS = "load_stations"


STORAGE_MESSAGES: dict[StorageOperation, str] = {
    StorageOperation.LOAD: "Patients could not be loaded.",
    StorageOperation.SEARCH: "Search could not be performed.",
    StorageOperation.CREATE: "Patient could not be created.",
    StorageOperation.UPDATE: "Patient could not be saved.",
    StorageOperation.DELETE: "Patient could not be deleted.",
    StorageOperation.LOAD_STATIONS: "Stations could not be loaded.",
}


class StorageError(AppError):
    """Repository call failed; the cause is chained, not part of the contract."""

    def __init__(self, operation: StorageOperation) -> None:
        self.operation = operation
        super().__init__(STORAGE_MESSAGES[operation])
