from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass, field

from intake.application.dto.patient_dto import PatientRecord
from intake.application.errors import PatientValidationError

SVNR_DATE_FORMAT = "%d%m%y"
# Offset of the birth-date part inside a 10-digit SVNR.
SVNR_DATE_OFFSET = 4

_SVNR_PATTERN = re.compile(r"[0-9]{10}")
_PHONE_PATTERN = re.compile(r"\+[0-9]{9,12}")

MSG_MISSING_PATIENT = "Missing patient data."
MSG_FIRST_NAME_MISSING = "First name missing."
MSG_LAST_NAME_MISSING = "Last name missing."
MSG_REASON_MISSING = "Reason for stay missing."
MSG_ADDRESS_MISSING = "Address missing."
MSG_BIRTH_DATE_MISSING = "Birth date missing."
MSG_SVNR_FORMAT = "SVNR must consist of exactly 10 digits."
MSG_SVNR_BIRTH_DATE = "SVNR invalid: last 6 digits must match the birth date (DDMMYY)."
MSG_PHONE_FORMAT = "Phone number invalid: must start with + followed by 9-12 digits (e.g. +436641234567)."
MSG_STATION_MISSING = "Please select a station."
MSG_STATION_UNKNOWN = "Selected station does not exist."

_NORMALIZED_FIELDS = ("first_name", "last_name", "reason", "address")
_REQUIRED_TEXT: tuple[tuple[str, str], ...] = (
    ("first_name", MSG_FIRST_NAME_MISSING),
    ("last_name", MSG_LAST_NAME_MISSING),
    ("reason", MSG_REASON_MISSING),
    ("address", MSG_ADDRESS_MISSING),
)


@dataclass(frozen=True)
class ValidationFailure:
    violations: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "\n".join(self.violations)


@dataclass(frozen=True)
class ValidationResult:
    """Normalized candidate plus the outcome of every rule."""

    patient: PatientRecord | None
    failure: ValidationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def violations(self) -> list[str]:
        return list(self.failure.violations) if self.failure else []


def normalize_name(value: str | None) -> str:
    """Return ``value`` with the first character upper-cased and the rest lower-cased."""
    if value is None:
        return ""
    text = value.strip().lower()
    if not text:
        return ""
    first = text[0].upper()
    # Keep characters like "ß" whose upper case is longer than one character.
    if len(first) != 1:
        first = text[0]
    return first + text[1:]


def normalize_patient(patient: PatientRecord) -> PatientRecord:
    updates = {name: normalize_name(getattr(patient, name)) for name in _NORMALIZED_FIELDS}
    return patient.model_copy(update=updates)


def svnr_date_suffix(patient: PatientRecord) -> str | None:
    if patient.birth_date is None:
        return None
    return patient.birth_date.strftime(SVNR_DATE_FORMAT)


def _is_blank(value: str | None) -> bool:
    return value is None or value == ""


def _check_svnr(patient: PatientRecord) -> str | None:
    svnr = patient.svnr
    if _is_blank(svnr) or not _SVNR_PATTERN.fullmatch(svnr or ""):
        return MSG_SVNR_FORMAT
    expected = svnr_date_suffix(patient)
    if expected is not None and (svnr or "")[SVNR_DATE_OFFSET:] != expected:
        return MSG_SVNR_BIRTH_DATE
    return None


def _check_phone(patient: PatientRecord) -> str | None:
    phone = patient.phone
    if _is_blank(phone):
        return None
    if not _PHONE_PATTERN.fullmatch(phone or ""):
        return MSG_PHONE_FORMAT
    return None


def _collect(patient: PatientRecord, known_station_ids: Collection[int] | None) -> list[str]:
    errors: list[str] = []
    for field_name, message in _REQUIRED_TEXT:
        if _is_blank(getattr(patient, field_name)):
            errors.append(message)
    if patient.birth_date is None:
        errors.append(MSG_BIRTH_DATE_MISSING)
    svnr_error = _check_svnr(patient)
    if svnr_error:
        errors.append(svnr_error)
    phone_error = _check_phone(patient)
    if phone_error:
        errors.append(phone_error)
    if patient.station_id is None:
        errors.append(MSG_STATION_MISSING)
    elif known_station_ids is not None and patient.station_id not in known_station_ids:
        errors.append(MSG_STATION_UNKNOWN)
    return errors


def validate_patient(
    candidate: PatientRecord | None,
    known_station_ids: Collection[int] | None = None,
) -> ValidationResult:
    """Normalize ``candidate`` into a copy and check every rule without short-circuiting.

    ``known_station_ids`` enables the station existence check; when it is None
    only the presence of a station is required.
    """
    if candidate is None:
        return ValidationResult(patient=None, failure=ValidationFailure([MSG_MISSING_PATIENT]))
    patient = normalize_patient(candidate)
    errors = _collect(patient, known_station_ids)
    if errors:
        return ValidationResult(patient=patient, failure=ValidationFailure(errors))
    return ValidationResult(patient=patient)


def collect_violations(
    candidate: PatientRecord | None,
    known_station_ids: Collection[int] | None = None,
) -> list[str]:
    return validate_patient(candidate, known_station_ids).violations


def assert_valid(
    candidate: PatientRecord | None,
    known_station_ids: Collection[int] | None = None,
) -> PatientRecord:
    result = validate_patient(candidate, known_station_ids)
    if result.failure is not None or result.patient is None:
        raise PatientValidationError(result.violations)
    return result.patient
