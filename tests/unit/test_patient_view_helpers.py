from __future__ import annotations

from datetime import date

from intake.application.dto.patient_dto import PatientRecord
from intake.ui.patient_view_helpers import (
    TABLE_COLUMNS,
    delete_confirmation_text,
    empty_result_hint,
    patient_details_text,
    patient_table_rows,
)

STATIONS = {1: "Ward A", 2: "Ward B"}


def _patient(**overrides) -> PatientRecord:
    data = {
        "id": 7,
        "first_name": "Anna",
        "last_name": "Bauer",
        "birth_date": date(2000, 5, 10),
        "svnr": "1234100500",
        "phone": "+436641234567",
        "address": "Main st 1",
        "reason": "Checkup",
        "station_id": 1,
    }
    data.update(overrides)
    return PatientRecord(**data)


def test_table_rows_follow_column_order() -> None:
    rows = patient_table_rows([_patient()], STATIONS)

    assert len(TABLE_COLUMNS) == 6
    assert rows == [("7", "Bauer", "Anna", "2000-05-10", "1234100500", "Ward A")]


def test_table_rows_tolerate_missing_values() -> None:
    rows = patient_table_rows([_patient(birth_date=None, svnr=None, station_id=5)], STATIONS)

    assert rows[0][3:] == ("", "", "")


def test_details_text_lists_every_field() -> None:
    text = patient_details_text(_patient(station_id=2, phone=None), STATIONS)

    assert text.splitlines() == [
        "ID: 7",
        "First name: Anna",
        "Last name: Bauer",
        "Birth date: 2000-05-10",
        "SVNR: 1234100500",
        "Phone: ",
        "Address: Main st 1",
        "Reason: Checkup",
        "Station: Ward B",
    ]


def test_delete_confirmation_names_patient() -> None:
    assert delete_confirmation_text(_patient()) == "Really delete?\nBauer Anna"


def test_empty_result_hint_invites_creation_for_searches() -> None:
    assert empty_result_hint("  ") == "No patients recorded yet."
    assert "Create" in empty_result_hint("huber")
