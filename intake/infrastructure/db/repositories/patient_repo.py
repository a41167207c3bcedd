from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError

from intake.application.dto.patient_dto import PatientRecord
from intake.application.errors import StorageError, StorageOperation
from intake.infrastructure.db.models_sqlalchemy import Patient
from intake.infrastructure.db.session import SessionFactory

_SEARCH_COLUMNS = (
    Patient.first_name,
    Patient.last_name,
    Patient.svnr,
    Patient.phone,
    Patient.address,
    Patient.reason,
)


def _to_record(row: Patient) -> PatientRecord:
    return PatientRecord(
        id=cast(int, row.id),
        first_name=cast("str | None", row.first_name),
        last_name=cast("str | None", row.last_name),
        birth_date=cast(Any, row.birth_date),
        svnr=cast("str | None", row.svnr),
        phone=cast("str | None", row.phone),
        address=cast("str | None", row.address),
        reason=cast("str | None", row.reason),
        station_id=cast("int | None", row.station_id),
    )


def _apply_fields(row: Any, patient: PatientRecord) -> None:
    row.first_name = patient.first_name
    row.last_name = patient.last_name
    row.birth_date = patient.birth_date
    row.svnr = patient.svnr
    row.phone = patient.phone
    row.address = patient.address
    row.reason = patient.reason
    row.station_id = patient.station_id


class PatientRepository:
    """CRUD access to the ``patient`` table.

    Every call opens its own session through ``session_factory`` and releases
    it before returning. No validation happens here; callers pass checked
    records. Any SQLAlchemy failure surfaces as :class:`StorageError`.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    def _ordered(self, stmt: Any) -> Any:
        return stmt.order_by(Patient.last_name, Patient.first_name, Patient.id)

    def find_all(self) -> list[PatientRecord]:
        try:
            with self.session_factory() as session:
                rows = session.execute(self._ordered(select(Patient))).scalars()
                return [_to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            logging.getLogger(__name__).exception("Loading patients failed")
            raise StorageError(StorageOperation.LOAD) from exc

    def search(self, query: str | None) -> list[PatientRecord]:
        clean = (query or "").strip()
        if not clean:
            return self.find_all()
        needle = clean.lower()
        condition = or_(
            *(func.lower(column).contains(needle, autoescape=True) for column in _SEARCH_COLUMNS)
        )
        try:
            with self.session_factory() as session:
                rows = session.execute(self._ordered(select(Patient).where(condition))).scalars()
                return [_to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            logging.getLogger(__name__).exception("Patient search failed for %r", clean)
            raise StorageError(StorageOperation.SEARCH) from exc

    def insert(self, patient: PatientRecord) -> PatientRecord:
        try:
            with self.session_factory() as session:
                row = Patient()
                _apply_fields(row, patient)
                session.add(row)
                session.flush()
                patient.id = cast(int, row.id)
        except SQLAlchemyError as exc:
            logging.getLogger(__name__).exception("Creating patient failed")
            raise StorageError(StorageOperation.CREATE) from exc
        return patient

    def update(self, patient: PatientRecord) -> None:
        try:
            with self.session_factory() as session:
                row = session.get(Patient, patient.id)
                if row is None:
                    logging.getLogger(__name__).warning("Update skipped, patient %s not found", patient.id)
                    return
                _apply_fields(row, patient)
        except SQLAlchemyError as exc:
            logging.getLogger(__name__).exception("Updating patient %s failed", patient.id)
            raise StorageError(StorageOperation.UPDATE) from exc

    def delete_by_id(self, patient_id: int) -> None:
        try:
            with self.session_factory() as session:
                session.execute(delete(Patient).where(Patient.id == patient_id))
        except SQLAlchemyError as exc:
            logging.getLogger(__name__).exception("Deleting patient %s failed", patient_id)
            raise StorageError(StorageOperation.DELETE) from exc
