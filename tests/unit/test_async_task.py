from __future__ import annotations

from PySide6.QtCore import QCoreApplication, QEvent, QObject, QThreadPool

from intake.application.errors import StorageError, StorageOperation
from intake.ui.widgets.async_task import TaskSignals, run_async


def _drain(qapp, pool: QThreadPool) -> None:
    assert pool.waitForDone(5000)
    qapp.processEvents()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)


def test_run_async_delivers_success_before_finished(qapp) -> None:
    owner = QObject()
    pool = QThreadPool()
    events: list[tuple[str, object]] = []

    task = run_async(
        owner,
        lambda: 21 * 2,
        on_success=lambda result: events.append(("success", result)),
        on_error=lambda exc: events.append(("error", exc)),
        on_finished=lambda: events.append(("finished", None)),
        pool=pool,
    )
    assert task.signals.parent() is owner

    _drain(qapp, pool)

    assert events == [("success", 42), ("finished", None)]


def test_run_async_delivers_error_before_finished(qapp) -> None:
    owner = QObject()
    pool = QThreadPool()
    events: list[tuple[str, object]] = []

    def _fail() -> None:
        raise StorageError(StorageOperation.SEARCH)

    run_async(
        owner,
        _fail,
        on_success=lambda result: events.append(("success", result)),
        on_error=lambda exc: events.append(("error", exc)),
        on_finished=lambda: events.append(("finished", None)),
        pool=pool,
    )

    _drain(qapp, pool)

    assert [name for name, _ in events] == ["error", "finished"]
    error = events[0][1]
    assert isinstance(error, StorageError)
    assert error.operation == StorageOperation.SEARCH


def test_run_async_releases_signals_after_finished(qapp) -> None:
    owner = QObject()
    pool = QThreadPool()

    run_async(owner, lambda: None, pool=pool)
    _drain(qapp, pool)

    assert owner.findChildren(TaskSignals) == []
