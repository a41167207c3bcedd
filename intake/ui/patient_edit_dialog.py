from __future__ import annotations

from collections.abc import Collection
from datetime import date

from PySide6.QtCore import QDate, Qt
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from intake.application.dto.patient_dto import PatientRecord
from intake.application.dto.station_dto import StationRecord
from intake.application.services.patient_service import PatientService
from intake.ui.widgets.notifications import clear_status, set_status

DEFAULT_BIRTH_DATE = date(2000, 1, 1)


class PatientEditDialog(QDialog):
    """Create/edit form; stays open until the input passes validation.

    The station catalog is fetched in the background by the caller and passed
    in, so validating on save never touches the database.
    """

    def __init__(
        self,
        patient_service: PatientService,
        stations: list[StationRecord],
        known_station_ids: Collection[int] | None = None,
        existing: PatientRecord | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.patient_service = patient_service
        self.stations = stations
        self.known_station_ids = known_station_ids
        self.existing = existing
        self.result_record: PatientRecord | None = None
        title = "Create patient" if existing is None else "Edit patient"
        self.setWindowTitle(title)
        self.setWindowFlag(Qt.WindowType.WindowContextHelpButtonHint, False)
        self.setMinimumWidth(480)
        self._build_ui(title)
        if existing is not None:
            self._load_patient(existing)

    def _build_ui(self, title: str) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        header = QLabel(title)
        header.setObjectName("pageTitle")
        layout.addWidget(header)

        box = QGroupBox("Patient data")
        form = QFormLayout()
        self.first_name = QLineEdit()
        self.last_name = QLineEdit()
        self.birth_date = QDateEdit()
        self.birth_date.setCalendarPopup(True)
        self.birth_date.setDisplayFormat("yyyy-MM-dd")
        self.birth_date.setMinimumDate(QDate(1900, 1, 1))
        self.birth_date.setMaximumDate(QDate.currentDate())
        self.birth_date.setDate(
            QDate(DEFAULT_BIRTH_DATE.year, DEFAULT_BIRTH_DATE.month, DEFAULT_BIRTH_DATE.day)
        )
        self.svnr = QLineEdit()
        self.svnr.setMaxLength(10)
        self.svnr.setPlaceholderText("10 digits")
        self.phone = QLineEdit()
        self.phone.setPlaceholderText("+436641234567")
        self.address = QLineEdit()
        self.reason = QLineEdit()
        self.station_combo = QComboBox()
        self.station_combo.addItem("Select", None)
        for station in self.stations:
            self.station_combo.addItem(station.name, station.id)

        form.addRow("First name *", self.first_name)
        form.addRow("Last name *", self.last_name)
        form.addRow("Birth date *", self.birth_date)
        form.addRow("SVNR *", self.svnr)
        form.addRow("Phone", self.phone)
        form.addRow("Address *", self.address)
        form.addRow("Reason *", self.reason)
        form.addRow("Station *", self.station_combo)
        box.setLayout(form)
        layout.addWidget(box)

        self.status = QLabel("")
        self.status.setObjectName("statusLabel")
        layout.addWidget(self.status)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self.save_btn = QPushButton("Save")
        self.save_btn.setObjectName("primaryButton")
        self.save_btn.clicked.connect(self._on_save)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(self.save_btn)
        btn_row.addWidget(cancel_btn)
        layout.addLayout(btn_row)

    def _load_patient(self, patient: PatientRecord) -> None:
        self.first_name.setText(patient.first_name or "")
        self.last_name.setText(patient.last_name or "")
        if patient.birth_date:
            bd = patient.birth_date
            self.birth_date.setDate(QDate(bd.year, bd.month, bd.day))
        self.svnr.setText(patient.svnr or "")
        self.phone.setText(patient.phone or "")
        self.address.setText(patient.address or "")
        self.reason.setText(patient.reason or "")
        idx = self.station_combo.findData(patient.station_id)
        if idx >= 0:
            self.station_combo.setCurrentIndex(idx)

    def _date_value(self) -> date | None:
        qd = self.birth_date.date()
        if not qd.isValid():
            return None
        return date(qd.year(), qd.month(), qd.day())

    def _collect_record(self) -> PatientRecord:
        return PatientRecord(
            id=self.existing.id if self.existing is not None else 0,
            first_name=self.first_name.text(),
            last_name=self.last_name.text(),
            birth_date=self._date_value(),
            svnr=self.svnr.text().strip(),
            phone=self.phone.text().strip(),
            address=self.address.text(),
            reason=self.reason.text(),
            station_id=self.station_combo.currentData(),
        )

    def _on_save(self) -> None:
        clear_status(self.status)
        result = self.patient_service.validate_only(self._collect_record(), self.known_station_ids)
        if not result.ok:
            set_status(self.status, "\n".join(result.violations), "error")
            return
        self.result_record = result.patient
        self.accept()
