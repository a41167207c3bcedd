from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QSplitter,
    QTableWidget,
    QTableWidgetItem,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from intake.application.dto.patient_dto import PatientRecord
from intake.application.dto.station_dto import StationRecord
from intake.container import Container
from intake.ui.patient_edit_dialog import PatientEditDialog
from intake.ui.patient_view_helpers import (
    TABLE_COLUMNS,
    delete_confirmation_text,
    empty_result_hint,
    patient_details_text,
    patient_table_rows,
)
from intake.ui.task_coordinator import FailureKind, TaskCoordinator, TaskFailure
from intake.ui.widgets.notifications import (
    clear_status,
    confirm,
    set_status,
    show_error,
    show_info,
    show_warning,
)


class MainWindow(QMainWindow):
    def __init__(self, container: Container) -> None:
        super().__init__()
        self.container = container
        self.patient_service = container.patient_service
        self.station_service = container.station_service
        self.current_patients: list[PatientRecord] = []
        self.station_map: dict[int, str] = {}
        self.setWindowTitle("Patient intake")
        self._build_ui()
        self.coordinator = TaskCoordinator(
            self,
            load=self._load_in_background,
            on_loaded=self._on_loaded,
            on_failure=self._on_failure,
            set_busy=self._set_busy,
        )
        self.load_table("")

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 12)

        search_row = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Name, SVNR, phone, address or reason")
        self.search_edit.returnPressed.connect(self._on_search)
        self.search_btn = QPushButton("Search")
        self.search_btn.clicked.connect(self._on_search)
        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.clicked.connect(self._on_refresh)
        search_row.addWidget(self.search_edit, 1)
        search_row.addWidget(self.search_btn)
        search_row.addWidget(self.refresh_btn)
        layout.addLayout(search_row)

        action_row = QHBoxLayout()
        self.create_btn = QPushButton("Create")
        self.create_btn.clicked.connect(self.create_patient)
        self.edit_btn = QPushButton("Edit")
        self.edit_btn.clicked.connect(self.edit_selected_patient)
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(self.delete_selected_patient)
        action_row.addWidget(self.create_btn)
        action_row.addWidget(self.edit_btn)
        action_row.addWidget(self.delete_btn)
        action_row.addStretch()
        layout.addLayout(action_row)

        splitter = QSplitter()
        self.table = QTableWidget(0, len(TABLE_COLUMNS))
        self.table.setHorizontalHeaderLabels(list(TABLE_COLUMNS))
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.details = QTextEdit()
        self.details.setReadOnly(True)
        splitter.addWidget(self.table)
        splitter.addWidget(self.details)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        layout.addWidget(splitter, 1)

        self.status = QLabel("")
        self.status.setObjectName("statusLabel")
        layout.addWidget(self.status)

        self.setCentralWidget(central)
        self.resize(1000, 600)

    def _action_buttons(self) -> list[QPushButton]:
        return [self.search_btn, self.refresh_btn, self.create_btn, self.edit_btn, self.delete_btn]

    def _set_busy(self, busy: bool) -> None:
        self.search_edit.setEnabled(not busy)
        for button in self._action_buttons():
            button.setEnabled(not busy)

    # Loading

    def _load_in_background(self, query: str) -> tuple[str, dict[int, str], list[PatientRecord]]:
        station_map = self.station_service.get_station_map()
        return query, station_map, self.patient_service.search(query)

    def load_table(self, query: str) -> None:
        self.coordinator.request_load(query)

    def _on_search(self) -> None:
        self.load_table(self.search_edit.text())

    def _on_refresh(self) -> None:
        self.search_edit.clear()
        self.coordinator.run_task(self.station_service.refresh, lambda _result: self.load_table(""))

    def _on_loaded(self, result: Any) -> None:
        query, station_map, patients = result
        self.station_map = station_map
        self.current_patients = list(patients)
        self._fill_table()
        self.details.clear()
        if self.current_patients:
            clear_status(self.status)
        else:
            set_status(self.status, empty_result_hint(query), "info")

    def _fill_table(self) -> None:
        rows = patient_table_rows(self.current_patients, self.station_map)
        self.table.setRowCount(len(rows))
        for row_idx, row in enumerate(rows):
            for col_idx, value in enumerate(row):
                self.table.setItem(row_idx, col_idx, QTableWidgetItem(value))

    def _on_failure(self, failure: TaskFailure) -> None:
        if failure.kind == FailureKind.VALIDATION:
            show_warning(self, failure.message, title="Invalid input")
        else:
            show_error(self, failure.message)

    # Selection

    def _selected_patient(self) -> PatientRecord | None:
        row = self.table.currentRow()
        if row < 0 or row >= len(self.current_patients):
            return None
        return self.current_patients[row]

    def _on_selection_changed(self) -> None:
        patient = self._selected_patient()
        if patient is not None:
            self.details.setPlainText(patient_details_text(patient, self.station_map))

    # Create / edit / delete

    def _editor_stations(self) -> tuple[list[StationRecord], set[int]]:
        return self.station_service.selectable_stations(), self.station_service.known_station_ids()

    def _edit_in_dialog(
        self,
        existing: PatientRecord | None,
        on_accepted: Callable[[PatientRecord], None],
    ) -> None:
        def _on_stations(result: tuple[list[StationRecord], set[int]]) -> None:
            stations, known_ids = result
            record = self._open_editor(stations, known_ids, existing)
            if record is not None:
                on_accepted(record)

        self.coordinator.run_task(self._editor_stations, _on_stations)

    def _open_editor(
        self,
        stations: list[StationRecord],
        known_ids: set[int],
        existing: PatientRecord | None,
    ) -> PatientRecord | None:
        dialog = PatientEditDialog(
            self.patient_service, stations, known_ids, existing=existing, parent=self
        )
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.result_record

    def _save(self, patient: PatientRecord, success_message: str) -> None:
        def _on_saved(_saved: Any) -> None:
            show_info(self, success_message)
            self.search_edit.clear()
            self.load_table("")

        self.coordinator.run_mutation(lambda: self.patient_service.save(patient), _on_saved)

    def create_patient(self) -> None:
        self._edit_in_dialog(None, lambda patient: self._save(patient, "Patient created."))

    def edit_selected_patient(self) -> None:
        selected = self._selected_patient()
        if selected is None:
            show_info(self, "Please select a patient first.")
            return
        self._edit_in_dialog(
            selected,
            lambda updated: self._save(updated.model_copy(update={"id": selected.id}), "Patient updated."),
        )

    def delete_selected_patient(self) -> None:
        selected = self._selected_patient()
        if selected is None:
            show_info(self, "Please select a patient first.")
            return
        if not confirm(self, "Delete", delete_confirmation_text(selected)):
            return

        def _on_deleted(_result: Any) -> None:
            show_info(self, "Patient deleted.")
            self.load_table("")

        self.coordinator.run_mutation(lambda: self.patient_service.delete(selected.id), _on_deleted)
