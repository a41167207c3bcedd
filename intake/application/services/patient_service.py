from __future__ import annotations

import logging
from collections.abc import Collection

from intake.application.dto.patient_dto import PatientRecord
from intake.application.errors import PatientValidationError
from intake.application.services.station_service import StationService
from intake.domain.rules.patient_rules import ValidationResult, assert_valid, validate_patient
from intake.infrastructure.db.repositories.patient_repo import PatientRepository

MSG_INVALID_ID = "Invalid patient ID."


class PatientService:
    def __init__(
        self,
        patient_repo: PatientRepository,
        station_service: StationService | None = None,
    ) -> None:
        self.patient_repo = patient_repo
        self.station_service = station_service

    def _known_station_ids(self) -> set[int] | None:
        if self.station_service is None:
            return None
        return self.station_service.known_station_ids()

    def list_all(self) -> list[PatientRecord]:
        return self.patient_repo.find_all()

    def search(self, query: str | None) -> list[PatientRecord]:
        return self.patient_repo.search(query)

    def validate_only(
        self,
        patient: PatientRecord | None,
        known_station_ids: Collection[int] | None = None,
    ) -> ValidationResult:
        """Validate without persisting.

        Callers on the GUI thread pass a station catalog they already hold so
        the check never reaches the database.
        """
        if known_station_ids is None:
            known_station_ids = self._known_station_ids()
        return validate_patient(patient, known_station_ids)

    def save(self, patient: PatientRecord | None) -> PatientRecord:
        """Validate, then insert (no identity yet) or replace the stored row."""
        normalized = assert_valid(patient, self._known_station_ids())
        if normalized.id <= 0:
            self.patient_repo.insert(normalized)
            logging.getLogger(__name__).info("Created patient %s", normalized.id)
        else:
            self.patient_repo.update(normalized)
            logging.getLogger(__name__).info("Updated patient %s", normalized.id)
        return normalized

    def delete(self, patient_id: int) -> None:
        if patient_id <= 0:
            raise PatientValidationError([MSG_INVALID_ID])
        self.patient_repo.delete_by_id(patient_id)
        logging.getLogger(__name__).info("Deleted patient %s", patient_id)
