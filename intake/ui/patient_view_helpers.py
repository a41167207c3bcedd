from __future__ import annotations

from collections.abc import Mapping, Sequence

from intake.application.dto.patient_dto import PatientRecord

TABLE_COLUMNS = ("ID", "Last name", "First name", "Birth date", "SVNR", "Station")


def _safe(value: object | None) -> str:
    return "" if value is None else str(value)


def station_label(station_id: int | None, station_map: Mapping[int, str]) -> str:
    if station_id is None:
        return ""
    return station_map.get(station_id, "")


def patient_table_rows(
    patients: Sequence[PatientRecord], station_map: Mapping[int, str]
) -> list[tuple[str, ...]]:
    return [
        (
            str(p.id),
            _safe(p.last_name),
            _safe(p.first_name),
            p.birth_date.isoformat() if p.birth_date else "",
            _safe(p.svnr),
            station_label(p.station_id, station_map),
        )
        for p in patients
    ]


def patient_details_text(patient: PatientRecord, station_map: Mapping[int, str]) -> str:
    lines = [
        f"ID: {patient.id}",
        f"First name: {_safe(patient.first_name)}",
        f"Last name: {_safe(patient.last_name)}",
        f"Birth date: {patient.birth_date.isoformat() if patient.birth_date else ''}",
        f"SVNR: {_safe(patient.svnr)}",
        f"Phone: {_safe(patient.phone)}",
        f"Address: {_safe(patient.address)}",
        f"Reason: {_safe(patient.reason)}",
        f"Station: {station_label(patient.station_id, station_map)}",
    ]
    return "\n".join(lines) + "\n"


def delete_confirmation_text(patient: PatientRecord) -> str:
    return f"Really delete?\n{_safe(patient.last_name)} {_safe(patient.first_name)}".rstrip()


def empty_result_hint(query: str) -> str:
    clean = query.strip()
    if not clean:
        return "No patients recorded yet."
    return f"No patient matches '{clean}'. Use Create to add a new record."
