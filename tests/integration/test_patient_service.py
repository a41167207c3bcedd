from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from intake.application.dto.patient_dto import PatientRecord
from intake.application.errors import PatientValidationError
from intake.application.services.patient_service import MSG_INVALID_ID, PatientService
from intake.application.services.station_service import StationService
from intake.bootstrap.startup import create_schema
from intake.domain.rules import patient_rules as rules
from intake.infrastructure.db.engine import create_db_engine
from intake.infrastructure.db.models_sqlalchemy import Station
from intake.infrastructure.db.repositories.patient_repo import PatientRepository
from intake.infrastructure.db.repositories.station_repo import StationRepository
from intake.infrastructure.db.session import make_session_factory


def _make_service(db_path: Path) -> PatientService:
    engine = create_db_engine(f"sqlite:///{db_path.as_posix()}")
    create_schema(engine)
    session_factory = make_session_factory(engine)
    with session_factory() as session:
        session.add_all(
            [
                Station(room_number=1, name="Ward A", max_beds=10),
                Station(room_number=2, name="Ward B", max_beds=5),
            ]
        )
    return PatientService(
        patient_repo=PatientRepository(session_factory),
        station_service=StationService(StationRepository(session_factory)),
    )


def _anna(**overrides) -> PatientRecord:
    data = {
        "first_name": "anna",
        "last_name": "bauer",
        "birth_date": date(2000, 5, 10),
        "svnr": "1234100500",
        "phone": "+436641234567",
        "address": "Main St 1",
        "reason": "checkup",
        "station_id": 1,
    }
    data.update(overrides)
    return PatientRecord(**data)


def test_save_creates_normalized_patient_found_by_search(tmp_path: Path) -> None:
    service = _make_service(tmp_path / "service_create.db")
    candidate = _anna()

    saved = service.save(candidate)

    assert saved.id > 0
    assert (saved.first_name, saved.last_name) == ("Anna", "Bauer")
    assert candidate.first_name == "anna"
    assert candidate.id == 0
    found = service.search("bauer")
    assert found == [saved]


def test_validate_only_reports_svnr_mismatch_without_writing(tmp_path: Path) -> None:
    service = _make_service(tmp_path / "service_validate.db")

    result = service.validate_only(_anna(svnr="1234100501"))

    assert result.ok is False
    assert result.violations == [rules.MSG_SVNR_BIRTH_DATE]
    assert service.list_all() == []


def test_save_rejects_invalid_patient_before_any_write(tmp_path: Path) -> None:
    service = _make_service(tmp_path / "service_reject.db")

    with pytest.raises(PatientValidationError) as exc_info:
        service.save(_anna(svnr="1234100501", station_id=None))

    assert str(exc_info.value) == f"{rules.MSG_SVNR_BIRTH_DATE}\n{rules.MSG_STATION_MISSING}"
    assert service.list_all() == []


def test_save_rejects_unknown_station(tmp_path: Path) -> None:
    service = _make_service(tmp_path / "service_station.db")

    with pytest.raises(PatientValidationError) as exc_info:
        service.save(_anna(station_id=99))

    assert exc_info.value.violations == [rules.MSG_STATION_UNKNOWN]


def test_save_with_identity_updates_existing_row(tmp_path: Path) -> None:
    service = _make_service(tmp_path / "service_update.db")
    created = service.save(_anna())

    updated = service.save(_anna(id=created.id, last_name="BERGER", station_id=2))

    assert updated.id == created.id
    patients = service.list_all()
    assert len(patients) == 1
    assert patients[0].last_name == "Berger"
    assert patients[0].station_id == 2


def test_delete_removes_patient_and_tolerates_repeat(tmp_path: Path) -> None:
    service = _make_service(tmp_path / "service_delete.db")
    created = service.save(_anna())

    service.delete(created.id)
    service.delete(created.id)

    assert service.list_all() == []


@pytest.mark.parametrize("patient_id", [0, -3])
def test_delete_rejects_non_positive_id(tmp_path: Path, patient_id: int) -> None:
    service = _make_service(tmp_path / "service_delete_invalid.db")

    with pytest.raises(PatientValidationError) as exc_info:
        service.delete(patient_id)

    assert exc_info.value.violations == [MSG_INVALID_ID]


def test_service_without_station_catalog_only_requires_station(tmp_path: Path) -> None:
    engine = create_db_engine(f"sqlite:///{(tmp_path / 'service_plain.db').as_posix()}")
    create_schema(engine)
    service = PatientService(patient_repo=PatientRepository(make_session_factory(engine)))

    assert service.validate_only(_anna(station_id=99)).ok is True
