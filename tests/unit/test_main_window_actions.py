from __future__ import annotations

from types import SimpleNamespace
from typing import Any, cast

from intake.application.dto.patient_dto import PatientRecord
from intake.application.dto.station_dto import StationRecord
from intake.ui.main_window import MainWindow

STATIONS = [
    StationRecord(room_number=1, name="Ward A", max_beds=4),
    StationRecord(room_number=9, name="Test", max_beds=1),
]


class _Toggle:
    def __init__(self) -> None:
        self.enabled = True
        self.cleared = False

    def setEnabled(self, enabled: bool) -> None:  # noqa: N802
        self.enabled = enabled

    def clear(self) -> None:
        self.cleared = True


class _StationService:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def selectable_stations(self) -> list[StationRecord]:
        self.calls.append("selectable")
        return [s for s in STATIONS if not s.is_test]

    def known_station_ids(self) -> set[int]:
        self.calls.append("known")
        return {s.id for s in STATIONS}

    def refresh(self) -> None:
        self.calls.append("refresh")


def _window(editor_result: PatientRecord | None) -> Any:
    tasks: list[tuple[Any, Any]] = []
    window = SimpleNamespace(
        station_service=_StationService(),
        coordinator=SimpleNamespace(
            run_task=lambda fn, on_success, on_failure=None: tasks.append((fn, on_success)),
        ),
        search_edit=_Toggle(),
        tasks=tasks,
        opened=[],
        saved=[],
        loads=[],
    )
    window._editor_stations = lambda: MainWindow._editor_stations(cast(MainWindow, window))
    window._edit_in_dialog = lambda existing, on_accepted: MainWindow._edit_in_dialog(
        cast(MainWindow, window), existing, on_accepted
    )

    def _open_editor(stations, known_ids, existing):
        window.opened.append((stations, known_ids, existing))
        return editor_result

    window._open_editor = _open_editor
    window._save = lambda patient, message: window.saved.append((patient, message))
    window.load_table = window.loads.append
    return window


def _run_in_background(window: Any) -> None:
    fn, on_success = window.tasks.pop(0)
    on_success(fn())


def test_create_fetches_stations_off_the_gui_thread() -> None:
    entered = PatientRecord(first_name="Anna")
    window = _window(entered)

    MainWindow.create_patient(cast(MainWindow, window))

    assert window.station_service.calls == []
    assert window.opened == []
    assert len(window.tasks) == 1

    _run_in_background(window)

    stations, known_ids, existing = window.opened[0]
    assert [s.name for s in stations] == ["Ward A"]
    assert known_ids == {1, 9}
    assert existing is None
    assert window.saved == [(entered, "Patient created.")]


def test_cancelled_editor_saves_nothing() -> None:
    window = _window(None)

    MainWindow.create_patient(cast(MainWindow, window))
    _run_in_background(window)

    assert len(window.opened) == 1
    assert window.saved == []


def test_refresh_drops_station_cache_in_background() -> None:
    window = _window(None)

    MainWindow._on_refresh(cast(MainWindow, window))

    assert window.search_edit.cleared is True
    assert window.station_service.calls == []

    _run_in_background(window)

    assert window.station_service.calls == ["refresh"]
    assert window.loads == [""]


def test_busy_disables_search_field_and_buttons() -> None:
    buttons = [_Toggle(), _Toggle()]
    window = SimpleNamespace(search_edit=_Toggle(), _action_buttons=lambda: buttons)

    MainWindow._set_busy(cast(MainWindow, window), True)

    assert window.search_edit.enabled is False
    assert [b.enabled for b in buttons] == [False, False]

    MainWindow._set_busy(cast(MainWindow, window), False)

    assert window.search_edit.enabled is True
    assert [b.enabled for b in buttons] == [True, True]
